class InvalidGraphError(Exception):
    """Graph content violates the node/edge invariants."""
    def __init__(self, message="Invalid flow graph."):
        super().__init__(message)

class NodeNotFoundError(Exception):
    """Node ID not found in the graph."""
    def __init__(self, message="Node ID not found in graph."):
        super().__init__(message)

class EdgeNotFoundError(Exception):
    """Edge ID not found in the graph."""
    def __init__(self, message="Edge ID not found in graph."):
        super().__init__(message)

class ExampleNotFoundError(Exception):
    """Example ID not present in the catalog."""
    def __init__(self, message="Example ID not found in catalog."):
        super().__init__(message)

class InvalidConfigError(Exception):
    """Configuration failed validation."""
    def __init__(self, message="Invalid simulation configuration."):
        super().__init__(message)
