"""
Tree-sitter query definitions for TypeScript.
Same queries serve the TypeScript and TSX grammars.
"""

from __future__ import annotations

QUERIES = {
    # Class-like declarations whose members are checked
    "classes": """
    (class_declaration) @class
    (abstract_class_declaration) @class
    (class) @class
    """,

    # Declarations that only feed the type hierarchy
    "interfaces": """
    (interface_declaration
      name: (type_identifier) @interface_name) @interface
    """,

    "object_types": """
    (type_alias_declaration
      name: (type_identifier) @type_name
      value: (object_type) @type_value) @type_alias
    """,
}
