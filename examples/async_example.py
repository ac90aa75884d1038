"""Example usage of the async OCI Distribution client."""

import asyncio
import logging
import sys

from oci_distribution_client import (
    AuthenticationError,
    ManifestClientError,
    Reference,
    RegistryClient,
    RegistryError,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main(image_name: str):
    """Check the API version, authenticate and pull a manifest with one client."""
    image = Reference.parse(image_name)

    async with RegistryClient() as client:
        try:
            version = await client.version(image.registry_host())
            logger.info(f"Registry {image.registry_host()} speaks {version}")
        except RegistryError as e:
            logger.warning(f"Version check failed: {e}")

        try:
            await client.auth(image)
            if client.token:
                logger.info("✓ Obtained pull token")
            else:
                logger.info("Registry allows anonymous pulls")

            manifest = await client.pull_manifest(image)
        except AuthenticationError as e:
            logger.error(f"Token request rejected: {e.reason}")
            return
        except ManifestClientError as e:
            logger.error(f"Registry refused {e.url}: {e.error}")
            return
        except RegistryError as e:
            logger.error(f"Registry error: {e}")
            return

    if manifest.is_manifest_list:
        logger.info(f"Manifest list with {len(manifest.manifests)} platforms")
        for entry in manifest.manifests:
            platform = entry.platform or {}
            logger.info(
                f"  {platform.get('os', '?')}/{platform.get('architecture', '?')}"
                f" {entry.digest}"
            )
    else:
        logger.info(f"Schema version {manifest.schema_version}")
        for layer in manifest.layers:
            logger.info(f"  {layer.digest} ({layer.size:,} bytes)")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "library/busybox:latest"))
