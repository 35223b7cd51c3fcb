"""Input-side model: mutations, sub-population clusters and mutation groups."""

from clonearchitect.elements.mutation import Mutation
from clonearchitect.elements.cluster import Cluster
from clonearchitect.elements.group import Group, sample_indices_from_tag

__all__ = ["Mutation", "Cluster", "Group", "sample_indices_from_tag"]
