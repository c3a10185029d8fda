"""C# syntax adapter.

Parses a full source text with tree-sitter and flattens the declarations
the pipeline cares about (usings, namespaces, types and the members of
each type) into a :class:`ParsedTree`. Declarations are listed in
pre-order, which is the order a forward traversal discovers them in.
Line numbers are 0-based rows, matching :class:`SourceBuffer` indices.
"""

from __future__ import annotations

import tree_sitter_language_pack

from codegenfix.domain.models import Declaration, DeclKind, ParsedTree

_TYPE_KINDS: dict[str, DeclKind] = {
    "class_declaration": "class",
    "struct_declaration": "struct",
    "enum_declaration": "enum",
    "interface_declaration": "interface",
}

_NAMESPACE_TYPES = {"namespace_declaration", "file_scoped_namespace_declaration"}

_MEMBER_TYPES = {
    "method_declaration",
    "field_declaration",
    "delegate_declaration",
    "property_declaration",
    "event_field_declaration",
    "constructor_declaration",
}

_BODY_TYPES = {"declaration_list", "enum_member_declaration_list"}

_parser = None


def _get_parser():
    global _parser
    if _parser is None:
        _parser = tree_sitter_language_pack.get_parser("csharp")
    return _parser


def parse_source(source_text: str) -> ParsedTree:
    tree = _get_parser().parse(source_text.encode("utf-8"))
    root = tree.root_node
    parsed = ParsedTree(has_errors=root.has_error)
    _walk(root, parsed.declarations)
    return parsed


def _walk(node, out: list[Declaration]) -> None:
    for child in node.named_children:
        t = child.type

        if t == "using_directive":
            out.append(Declaration(
                kind="using",
                name=_text(child).strip(),
                start_line=_row(child.start_point),
                end_line=_row(child.end_point),
                node_type=t,
            ))

        elif t in _NAMESPACE_TYPES:
            body = _body(child)
            out.append(Declaration(
                kind="namespace",
                name=_name(child),
                start_line=_row(child.start_point),
                end_line=_row(child.end_point),
                # file-scoped namespaces open their scope on the declaration line
                body_start_line=_row(body.start_point) if body is not None else _row(child.start_point),
                node_type=t,
            ))
            _walk(body if body is not None else child, out)

        elif t in _TYPE_KINDS:
            body = _body(child)
            decl = Declaration(
                kind=_TYPE_KINDS[t],
                name=_name(child),
                start_line=_row(child.start_point),
                end_line=_row(child.end_point),
                body_start_line=_row(body.start_point) if body is not None else None,
                node_type=t,
            )
            out.append(decl)
            if body is not None:
                for m in body.named_children:
                    if m.type in _MEMBER_TYPES:
                        decl.members.append(Declaration(
                            kind="member",
                            name=_member_name(m),
                            start_line=_row(m.start_point),
                            end_line=_row(m.end_point),
                            node_type=m.type,
                        ))
                _walk(body, out)

        elif t in ("declaration_list", "ERROR"):
            _walk(child, out)


def _row(point) -> int:
    return point[0]


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _body(node):
    body = node.child_by_field_name("body")
    if body is not None:
        return body
    for c in node.named_children:
        if c.type in _BODY_TYPES:
            return c
    return None


def _name(node) -> str:
    n = node.child_by_field_name("name")
    return _text(n) if n is not None else ""


def _member_name(node) -> str:
    n = node.child_by_field_name("name")
    if n is not None:
        return _text(n)

    # fields carry their name on the first variable declarator
    stack = list(node.named_children)
    while stack:
        c = stack.pop(0)
        if c.type == "variable_declarator":
            n = c.child_by_field_name("name")
            if n is not None:
                return _text(n)
            for ident in c.named_children:
                if ident.type == "identifier":
                    return _text(ident)
        stack.extend(c.named_children)
    return ""
