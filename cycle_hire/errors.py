from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for workflow failures raised by this package."""


class ConfigError(PipelineError, KeyError):
    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class SchemaError(PipelineError, ValueError):
    pass


class EmptyDatasetError(PipelineError):
    pass


class DatasetNotFoundError(PipelineError, LookupError):
    pass


class UnknownCRSError(PipelineError, ValueError):
    pass


class CRSMismatchError(PipelineError, ValueError):
    pass


class EmptyJoinError(PipelineError):
    pass


class MissingGeometryError(PipelineError, TypeError):
    pass


class LayerExistsError(PipelineError):
    pass
