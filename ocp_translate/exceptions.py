"""
Custom exceptions for ocp-translate with helpful error messages.
"""


class OcpTranslateError(Exception):
    """Base exception for ocp-translate errors."""

    def __init__(self, message: str, suggestion: str = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.message)

    def __str__(self):
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class TranslationError(OcpTranslateError):
    """Errors raised while translating a resource."""

    pass


class ValidationError(TranslationError):
    """Source resources are invalid or inconsistent with each other."""

    pass


class MismatchError(ValidationError):
    """A dependent resource does not match the resource that references it."""

    def __init__(self, field: str, expected: str, actual: str, suggestion: str = None):
        self.field = field
        self.expected = expected
        self.actual = actual
        message = f"{field} mismatch: expected '{expected}', got '{actual}'"
        if suggestion is None:
            suggestion = (
                "Make sure the dependent resource is the one referenced by the source:\n"
                "  the Service passed with a Route must live in the Route's namespace\n"
                "  and be named by Route.spec.to.name."
            )
        super().__init__(message, suggestion)


class SourceFormatError(ValidationError):
    """A source document lacks required structure."""

    def __init__(self, kind: str, details: str):
        self.kind = kind
        message = f"Invalid {kind}: {details}"
        suggestion = (
            "Export the resource again with:\n"
            f"  oc get {kind.lower()} <name> -o yaml\n\n"
            "and check that metadata.name and the fields above are present."
        )
        super().__init__(message, suggestion)


class PortResolutionError(TranslationError):
    """A route port reference matches no port of the dependent service."""

    def __init__(self, requested, candidates: list[dict]):
        self.requested = requested
        self.candidates = candidates

        if requested is None:
            message = "Cannot pick a default port: the service exposes no ports"
        else:
            message = f"Cannot resolve port {requested!r} against service ports {candidates!r}"

        suggestion = (
            "Route.spec.port.targetPort must be either the name of a service port\n"
            "or the numeric targetPort of one. List the service ports with:\n"
            "  oc get service <name> -o jsonpath='{.spec.ports}'"
        )
        super().__init__(message, suggestion)


class LoadError(OcpTranslateError):
    """Source manifests could not be read or parsed."""

    def __init__(self, path: str, details: str):
        self.path = path
        message = f"Cannot load {path}: {details}"
        suggestion = (
            "Source files must be YAML or JSON manifests (.yaml, .yml, .json).\n"
            "Check the path and the document syntax:\n"
            f"  ls -l {path}"
        )
        super().__init__(message, suggestion)


class ConfigurationError(OcpTranslateError):
    """Configuration file errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Configuration file is invalid."""

    def __init__(self, error_details: str):
        message = f"Invalid configuration file: {error_details}"

        suggestion = (
            "Fix the ocp-translate.yaml file. Known keys are:\n"
            "  name, domain, user_exclusion_pattern, service_account_pattern,\n"
            "  service_account_segments, role_prefix, secret_prefix, run_as_user_overrides"
        )
        super().__init__(message, suggestion)


def format_error_for_cli(error: Exception) -> str:
    """
    Format an exception for CLI display with helpful information.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, OcpTranslateError):
        output = f"[red]Error:[/red] {error.message}"
        if error.suggestion:
            output += f"\n\n[yellow]{error.suggestion}[/yellow]"
        return output
    else:
        return f"[red]Error:[/red] {str(error)}"
