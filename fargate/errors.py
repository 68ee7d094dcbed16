"""Errors raised while synthesizing a deployment"""


class FargateError(Exception):
    pass


class ConfigurationError(FargateError, ValueError):
    """The deployment options cannot produce a valid resource graph."""


class DuplicateResourceError(FargateError):
    def __init__(self, name):
        super().__init__(f'resource {name} is emitted by more than one component')
        self.name = name
