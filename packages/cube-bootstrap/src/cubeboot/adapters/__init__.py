from .docker import DockerCli
from .kind import KindCli
from .kubectl import KubectlCli
from .protocols import ClusterManager, ContainerRuntime, KubeApi

__all__ = ["ClusterManager", "ContainerRuntime", "DockerCli", "KindCli", "KubeApi", "KubectlCli"]
