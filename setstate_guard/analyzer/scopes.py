"""Lexical scope resolution for JavaScript/TypeScript identifiers.

Resolves a name to the scope that declares it so that two identifiers compare
equal only when they denote the same binding. `var` declarations hoist to the
nearest function (or the program); `let`, `const`, classes and block-level
function declarations bind in the enclosing block.
"""
from typing import Dict, Optional, Set
from tree_sitter import Node

from .syntax import FUNCTION_TYPES, NodeKey, bound_names, node_key, node_text

ScopeId = NodeKey

BLOCK_SCOPE_TYPES = {
    'statement_block',
    'for_statement',
    'for_in_statement',
    'catch_clause',
    'class_body',
    'switch_body',
}

SCOPE_TYPES = {'program'} | FUNCTION_TYPES | BLOCK_SCOPE_TYPES

# Declarations visible to the block they appear in
LEXICAL_DECLARATIONS = {'lexical_declaration'}
HOISTED_DECLARATIONS = {'variable_declaration'}
NAMED_DECLARATIONS = {
    'function_declaration',
    'generator_function_declaration',
    'class_declaration',
    'abstract_class_declaration',
}


class ScopeResolver:
    """Per-tree scope table, built lazily as scopes are queried."""

    def __init__(self, root: Node):
        self.root = root
        self._declarations: Dict[NodeKey, Set[str]] = {}

    def scope_of(self, node: Node) -> ScopeId:
        """Return the ScopeId of the scope declaring the name spelled by `node`.

        Undeclared names (globals, imports from other files) resolve to the
        program scope.
        """
        name = node_text(node)
        scope = self.enclosing_scope(node)
        while scope is not None:
            if name in self.declarations(scope):
                return node_key(scope)
            scope = self.enclosing_scope(scope)
        return node_key(self.root)

    def enclosing_scope(self, node: Node) -> Optional[Node]:
        current = node.parent
        while current is not None:
            if current.type in SCOPE_TYPES:
                return current
            current = current.parent
        return None

    def declarations(self, scope: Node) -> Set[str]:
        key = node_key(scope)
        if key not in self._declarations:
            self._declarations[key] = self._collect_declarations(scope)
        return self._declarations[key]

    def _collect_declarations(self, scope: Node) -> Set[str]:
        names: Set[str] = set()
        kind = scope.type

        if kind in FUNCTION_TYPES:
            names.update(self._parameter_names(scope))
            # A named function expression can refer to itself
            if kind in ('function_expression', 'function', 'generator_function'):
                own_name = scope.child_by_field_name('name')
                if own_name is not None:
                    names.add(node_text(own_name))
            body = scope.child_by_field_name('body')
            if body is not None:
                names.update(self._hoisted_vars(body))
            return names

        if kind == 'program':
            names.update(self._hoisted_vars(scope))
            names.update(self._import_names(scope))
            names.update(self._block_declarations(scope))
            return names

        if kind == 'for_statement':
            initializer = scope.child_by_field_name('initializer')
            if initializer is not None and initializer.type in LEXICAL_DECLARATIONS:
                names.update(self._declared_names(initializer))
            return names

        if kind == 'for_in_statement':
            # `for (const k of items)` binds k per iteration; bare `for (k of ...)` does not
            if any(child.type in ('let', 'const', 'var') for child in scope.children):
                names.update(name for name, _ in bound_names(scope.child_by_field_name('left')))
            return names

        if kind == 'catch_clause':
            names.update(name for name, _ in bound_names(scope.child_by_field_name('parameter')))
            return names

        names.update(self._block_declarations(scope))
        return names

    def _parameter_names(self, function: Node) -> Set[str]:
        names = set()
        # Arrow functions with a single bare parameter use the `parameter` field
        single = function.child_by_field_name('parameter')
        if single is not None:
            names.update(name for name, _ in bound_names(single))
        params = function.child_by_field_name('parameters')
        if params is not None:
            for param in params.named_children:
                names.update(name for name, _ in bound_names(param))
        return names

    def _block_declarations(self, block: Node) -> Set[str]:
        names = set()
        for child in block.named_children:
            if child.type == 'export_statement':
                declaration = child.child_by_field_name('declaration')
                if declaration is None:
                    continue
                child = declaration
            if child.type in LEXICAL_DECLARATIONS:
                names.update(self._declared_names(child))
            elif child.type in NAMED_DECLARATIONS:
                name = child.child_by_field_name('name')
                if name is not None:
                    names.add(node_text(name))
        return names

    def _hoisted_vars(self, body: Node) -> Set[str]:
        """Collect `var` bindings under `body` without entering nested functions."""
        names = set()
        stack = list(body.named_children)
        while stack:
            current = stack.pop()
            if current.type in FUNCTION_TYPES:
                continue
            if current.type in HOISTED_DECLARATIONS:
                names.update(self._declared_names(current))
            stack.extend(current.named_children)
        return names

    def _import_names(self, program: Node) -> Set[str]:
        names = set()
        for child in program.named_children:
            if child.type != 'import_statement':
                continue
            for sub in child.named_children:
                if sub.type != 'import_clause':
                    continue
                for node in sub.named_children:
                    if node.type == 'identifier':
                        names.add(node_text(node))
                    elif node.type == 'namespace_import':
                        names.update(node_text(n) for n in node.named_children if n.type == 'identifier')
                    elif node.type == 'named_imports':
                        for specifier in node.named_children:
                            if specifier.type != 'import_specifier':
                                continue
                            local = specifier.child_by_field_name('alias') or specifier.child_by_field_name('name')
                            if local is not None:
                                names.add(node_text(local))
        return names

    def _declared_names(self, declaration: Node) -> Set[str]:
        names = set()
        for declarator in declaration.named_children:
            if declarator.type == 'variable_declarator':
                names.update(name for name, _ in bound_names(declarator.child_by_field_name('name')))
        return names
