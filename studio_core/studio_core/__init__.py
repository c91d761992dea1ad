"""Brand Studio core: relational schema, repositories, and styleguide domain logic."""

__version__ = "0.1.0"
