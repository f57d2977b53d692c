class NumberNode:
    def __init__(self, value): self.value = value

class MetricPathNode:
    def __init__(self, group, field):
        self.group = group
        self.field = field

    @property
    def path(self):
        return f"{self.group}.{self.field}"

class ContextVariableNode:
    def __init__(self, name): self.name = name

class UnaryOpNode:
    def __init__(self, op, operand):
        self.op = op
        self.operand = operand

class BinaryOpNode:
    def __init__(self, left, op, right):
        self.left = left
        self.op = op
        self.right = right

class FunctionCallNode:
    def __init__(self, name, args):
        self.name = name
        self.args = args
