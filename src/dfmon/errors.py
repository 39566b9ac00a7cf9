from __future__ import annotations


class DfmonError(Exception):
    """Base class for fatal dfmon errors (the CLI exits non-zero)."""


class MountTableMissing(DfmonError):
    pass


class MountReadError(DfmonError):
    pass


class ConfigError(DfmonError):
    pass
