from .parser import check_expression, parse_expression, referenced_identifiers
