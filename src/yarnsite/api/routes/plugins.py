"""Plugin package listing."""

from fastapi import APIRouter

from yarnsite.api.dependencies import PackageResolverDep, ProjectRootDep
from yarnsite.api.models import APIResponse, PluginListResponse
from yarnsite.plugins import load_manifest

router = APIRouter(tags=["plugins"])


@router.get("/plugins", response_model=APIResponse[PluginListResponse])
def list_plugins(
    resolver: PackageResolverDep, project_root: ProjectRootDep
) -> APIResponse[PluginListResponse]:
    """List plugin packages declared in the project's package.json."""
    # Raises ManifestNotFoundError / ManifestParseError, mapped by the app
    names = resolver.resolve(load_manifest(project_root))
    return APIResponse(data=PluginListResponse(prefix=resolver.prefix, plugins=sorted(names)))
