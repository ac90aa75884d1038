"""Async functional registry operations."""

from .core.registry_client import RegistryClient
from .models import Manifest
from .reference import Reference


async def get_api_version(host: str, scheme: str = "https", timeout: int = 30) -> str:
    """레지스트리가 지원하는 배포 API 버전을 조회합니다.

    Args:
        host: 레지스트리 호스트 (예: "ghcr.io", "localhost:5000")
        scheme: URL 스킴 (기본값: "https", 로컬 레지스트리는 "http")
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        str: Docker-Distribution-Api-Version 헤더 값 (예: "registry/2.0")

    Raises:
        MissingVersionHeaderError: 버전 헤더가 없는 경우
        RegistryConnectionError: 레지스트리에 연결할 수 없는 경우

    Examples:
        version = await get_api_version("ghcr.io")
        print(f"API 버전: {version}")
    """
    async with RegistryClient(scheme=scheme, timeout=timeout) as client:
        return await client.version(host)


async def pull_manifest(
    image: str | Reference,
    authenticate: bool = True,
    scheme: str = "https",
    timeout: int = 30,
) -> Manifest:
    """이미지의 매니페스트를 조회합니다.

    필요한 경우 읽기 전용(pull) 토큰을 먼저 발급받은 뒤 매니페스트를 요청합니다.

    Args:
        image: 이미지 참조 (예: "ghcr.io/org/app:v1", "nginx:alpine")
        authenticate: 토큰 인증 수행 여부 (기본값: True, False면 익명 요청)
        scheme: URL 스킴 (기본값: "https")
        timeout: 요청 타임아웃 (초, 기본값: 30초)

    Returns:
        Manifest: 매니페스트 또는 매니페스트 리스트

    Raises:
        ValidationError: 이미지 참조 형식이 잘못된 경우
        AuthenticationError: 토큰 발급이 거부된 경우
        ManifestError: 매니페스트 요청이 실패한 경우
        RegistryConnectionError: 레지스트리에 연결할 수 없는 경우

    Examples:
        manifest = await pull_manifest("nginx:alpine")
        print(f"스키마 버전: {manifest.schema_version}")
        print(f"레이어 수: {len(manifest.layers)}")
    """
    reference = image if isinstance(image, Reference) else Reference.parse(image)

    async with RegistryClient(scheme=scheme, timeout=timeout) as client:
        if authenticate:
            await client.auth(reference)
        return await client.pull_manifest(reference)
