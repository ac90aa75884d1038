"""Image reference parsing."""

import re
from dataclasses import dataclass
from typing import Optional

from .exceptions import ValidationError
from .utils.digest import validate_digest

DEFAULT_REGISTRY = "registry-1.docker.io"
DEFAULT_TAG = "latest"

# Hostnames under which Docker Hub is addressed in image names
DOCKER_HUB_ALIASES = {"docker.io", "index.docker.io", DEFAULT_REGISTRY}

PATH_COMPONENT_PATTERN = re.compile(r"^[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*$")
TAG_PATTERN = re.compile(r"^[\w][\w.-]{0,127}$")


def parse_repository_tag(repo_tag: str) -> tuple[str, str]:
    """저장소:태그 문자열을 저장소와 태그 구성요소로 파싱합니다.

    Args:
        repo_tag: 저장소 태그 문자열
            - 예: "nginx:alpine", "localhost:5000/myapp:latest"
            - 레지스트리 포함: "registry.io/company/app:v1.0"

    Returns:
        tuple[str, str]: (저장소, 태그) 튜플

    Examples:
        # 기본 이미지 태그 파싱
        repo, tag = parse_repository_tag("nginx:alpine")
        # 결과: ("nginx", "alpine")

        # 레지스트리 포트는 태그로 취급하지 않음
        repo, tag = parse_repository_tag("localhost:5000/myapp")
        # 결과: ("localhost:5000/myapp", "latest")
    """
    # Only a ':' after the last '/' separates a tag; earlier ones are ports
    last_slash = repo_tag.rfind("/")
    last_colon = repo_tag.rfind(":")
    if last_colon > last_slash:
        repo, tag = repo_tag[:last_colon], repo_tag[last_colon + 1 :]
        return repo, tag or DEFAULT_TAG

    return repo_tag, DEFAULT_TAG


def _split_registry(name: str) -> tuple[str, str]:
    first, sep, rest = name.partition("/")
    if sep and ("." in first or ":" in first or first == "localhost"):
        host = DEFAULT_REGISTRY if first in DOCKER_HUB_ALIASES else first
        return host, rest
    return DEFAULT_REGISTRY, name


@dataclass(frozen=True)
class Reference:
    """A parsed image reference: registry host, repository, tag or digest."""

    registry: str
    repository: str
    tag: Optional[str] = DEFAULT_TAG
    digest: Optional[str] = None

    @classmethod
    def parse(cls, image: str) -> "Reference":
        """Parse ``[registry/]repository[:tag][@digest]``.

        Names without a registry resolve to Docker Hub, where single
        component names live under ``library/``.

        Raises:
            ValidationError: If the reference is malformed
        """
        image = image.strip()
        if not image:
            raise ValidationError("Image reference must not be empty")

        digest = None
        if "@" in image:
            image, digest = image.split("@", 1)
            if not validate_digest(digest):
                raise ValidationError(f"Invalid digest format: {digest}")

        registry, remainder = _split_registry(image)
        repository, tag = parse_repository_tag(remainder)
        if digest is not None and ":" not in remainder.rsplit("/", 1)[-1]:
            tag = None

        if registry == DEFAULT_REGISTRY and "/" not in repository:
            repository = f"library/{repository}"

        if not repository or not all(
            PATH_COMPONENT_PATTERN.match(part) for part in repository.split("/")
        ):
            raise ValidationError(f"Invalid repository name: {repository!r}")
        if tag is not None and not TAG_PATTERN.match(tag):
            raise ValidationError(f"Invalid tag: {tag!r}")

        return cls(registry=registry, repository=repository, tag=tag, digest=digest)

    def registry_host(self) -> str:
        return self.registry

    def repository_path(self) -> str:
        return self.repository

    def manifest_reference(self) -> str:
        """Digest when pinned, otherwise the tag."""
        return self.digest or self.tag or DEFAULT_TAG

    def to_v2_manifest_url(self, scheme: str = "https") -> str:
        return (
            f"{scheme}://{self.registry}/v2/{self.repository}"
            f"/manifests/{self.manifest_reference()}"
        )

    def __str__(self) -> str:
        name = f"{self.registry}/{self.repository}"
        if self.tag:
            name += f":{self.tag}"
        if self.digest:
            name += f"@{self.digest}"
        return name
