"""vibectl - module lifecycle engine for project scaffolding.

Installs module bundles of generated files into a project, tracks what was
written, removes modules without destroying user edits, and undoes
destructive operations.
"""

__version__ = "0.1.0"
