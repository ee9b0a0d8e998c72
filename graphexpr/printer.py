from .ast import Binary, Call, Name, Node, Number, Unary, children


def number_str(node: Number) -> str:
    value = node.value
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _render(node: Node, parts) -> str:
    if isinstance(node, Number):
        return number_str(node)
    if isinstance(node, Name):
        return node.name
    if isinstance(node, Unary):
        return f"{node.op}{parts[0]}"
    if isinstance(node, Binary):
        return f"({parts[0]} {node.op} {parts[1]})"
    if isinstance(node, Call):
        return f"{node.func}({', '.join(parts)})"
    raise ValueError(f"invalid expression node {node!r}")


def format_expression(node: Node) -> str:
    """Render ``node`` in canonical, fully parenthesised form."""
    # post-order walk with an explicit stack; long operator chains nest as
    # deep as they are long
    out = []
    stack = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if expanded:
            count = len(children(current))
            parts = out[len(out) - count:] if count else []
            del out[len(out) - count:]
            out.append(_render(current, parts))
            continue
        stack.append((current, True))
        stack.extend((child, False) for child in reversed(children(current)))
    return out[0]
