from typing import Optional


class GitError(Exception):
    caller: Optional[str] = None


class MissingParameterError(GitError):
    def __init__(self, parameter: str) -> None:
        super().__init__(f"The function requires a '{parameter}' parameter but none was provided.")
        self.parameter = parameter


class RefNotFoundError(GitError):
    def __init__(self, ref: str) -> None:
        super().__init__(f"Could not find ref '{ref}'")
        self.ref = ref


class SymrefLoopError(GitError):
    """There is a loop between one or more symrefs."""

    def __init__(self, ref: str, depth: int) -> None:
        super().__init__(f"Symbolic ref '{ref}' did not resolve after {depth} hops")
        self.ref = ref
        self.depth = depth


class UpdateServerInfoError(GitError):
    caller = 'update_server_info'

    def __init__(self, error: BaseException) -> None:
        super().__init__(f"{self.caller} failed: {error}")
        self.error = error


def assert_parameter(name: str, value: object) -> None:
    if value is None or value == '':
        raise MissingParameterError(name)
