"""Turn resolved artifact paths from the Gradle cache into external nodes."""

from __future__ import annotations

from gradlegraph.errors import ExternalPathError
from gradlegraph.model import ExternalDepData, ExternalNode

EXTERNAL_NODE_TYPE = "gradle"
ARTIFACT_EXTENSIONS = (".jar",)


def is_artifact(path: str) -> bool:
    return path.endswith(ARTIFACT_EXTENSIONS)


def external_dep_from_input_file(
    input_file: str, external_nodes: dict[str, ExternalNode]
) -> str:
    """Register the artifact at *input_file* and return its external node key.

    The path is expected to end with the Gradle module cache layout::

        org.apache.commons/commons-lang3/3.13.0/b726.../commons-lang3-3.13.0.jar

    which yields the key ``gradle:commons-lang3-3.13.0`` with package name
    ``org.apache.commons.commons-lang3``.  Registering the same path again
    overwrites the entry with identical data.
    """
    segments = input_file.replace("\\", "/").split("/")
    if len(segments) < 5:
        raise ExternalPathError(
            f"Expected group/artifact/version/hash/file in {input_file!r}"
        )

    file_name = segments[-1]
    name_key = file_name.rsplit(".", 1)[0] if "." in file_name else file_name
    hash_ = segments[-2]
    version = segments[-3]
    package_name = segments[-4]
    package_group = segments[-5]

    key = f"{EXTERNAL_NODE_TYPE}:{name_key}"
    external_nodes[key] = ExternalNode(
        type=EXTERNAL_NODE_TYPE,
        name=key,
        data=ExternalDepData(
            version=version,
            package_name=f"{package_group}.{package_name}",
            hash=hash_,
        ),
    )
    return key
