"""Salarizare - payroll and TAC bookkeeping for small Romanian companies."""

__version__ = "0.1.0"


# Import main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "main":
        from salarizare.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
