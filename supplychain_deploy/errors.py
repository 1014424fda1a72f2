class DeployError(Exception):
    """Base class for failures raised by the deployment steps."""


class MissingInputError(DeployError):
    pass


class TemplateDeploymentError(DeployError):
    def __init__(self, deployment_name: str, message: str) -> None:
        super().__init__(f"Deployment '{deployment_name}' failed: {message}")
        self.deployment_name = deployment_name


class ContractDeploymentError(DeployError):
    pass


class NodeNotReadyError(DeployError):
    pass
