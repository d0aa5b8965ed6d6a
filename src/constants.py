"""Constants used in the project."""

from enum import Enum


class Scopes(Enum):
    """Dependency scopes understood by the classpath builders.

    Args:
        Enum (string): Maven scope names.
    """

    COMPILE = "compile"
    PROVIDED = "provided"
    RUNTIME = "runtime"
    SYSTEM = "system"
    TEST = "test"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Transport schemes the resolver is allowed to talk to
    SUPPORTED_PROTOCOLS = ["http", "https", "file", "s3"]

    DEFAULT_CONTENT_TYPE = "default"
    DEFAULT_EXTENSION = "jar"
    POM_EXTENSION = "pom"
    POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"

    # Mirror selection
    WILDCARD = "*"
    EXTERNAL_WILDCARD = "external:*"
    LOCAL_HOSTS = ["localhost", "127.0.0.1"]

    # Settings lookup
    ENV_USER_SETTINGS = "AETHER_USER_SETTINGS"
    ENV_GLOBAL_SETTINGS = "AETHER_GLOBAL_SETTINGS"
    DEFAULT_USER_SETTINGS = "~/.aether/settings.yml"

    # Logging
    ENV_LOG_LEVEL = "AETHER_LOG_LEVEL"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
