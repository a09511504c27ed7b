from machina.domain.model.project.project_context import HostContext, ProjectContext

__all__ = ["HostContext", "ProjectContext"]
