"""GraphQL schema building, query validation rules and variable coercion."""

__version__ = "0.1.0"