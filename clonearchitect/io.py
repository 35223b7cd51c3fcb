from typing import Any, Dict, IO, List, Mapping, Sequence, Union
import json

import numpy as np

from clonearchitect.elements.cluster import Cluster
from clonearchitect.elements.group import Group
from clonearchitect.elements.mutation import Mutation
from clonearchitect.exceptions import InputFormatError
from clonearchitect.lineage.tree import LineageTree
from clonearchitect.lineage.types import LineageResult


class LineageEncoder(json.JSONEncoder):
    def default(self, o: Any):
        # numpy scalars and arrays
        if isinstance(o, np.ndarray):
            return o.tolist()
        if isinstance(o, np.integer):
            return int(o)
        if isinstance(o, np.floating):
            return float(o)
        if isinstance(o, np.bool_):
            return bool(o)

        # Model objects serialize themselves
        if isinstance(o, (LineageTree, LineageResult, Group, Cluster, Mutation)):
            return o.to_dict()

        return super().default(o)


def _mutation_from_entry(entry: Any, index: int, num_samples: int) -> Mutation:
    if isinstance(entry, Mapping):
        frequencies = entry.get("frequencies")
        if frequencies is None:
            raise InputFormatError(f"Mutation {index} has no frequencies")
        mutation = Mutation.from_values(
            mutation_id=int(entry.get("id", index)),
            frequencies=frequencies,
            chromosome=str(entry.get("chromosome", "")),
            position=int(entry.get("position", 0)),
            description=str(entry.get("description", "")),
        )
    else:
        mutation = Mutation.from_values(mutation_id=index, frequencies=entry)
    if len(mutation.frequencies) != num_samples:
        raise InputFormatError(
            f"Mutation {mutation.mutation_id} has {len(mutation.frequencies)} "
            f"frequencies; expected {num_samples}"
        )
    return mutation


def _cluster_from_entry(
    entry: Mapping[str, Any], index: int, group: Group, min_robust_size: int
) -> Cluster:
    members = entry.get("members", entry.get("membership", ()))
    cluster_id = int(entry.get("id", index))
    if "centroid" not in entry:
        if not members:
            raise InputFormatError(
                f"Cluster {cluster_id} of group {group.tag} has neither a "
                "centroid nor members"
            )
        if any(int(i) < 0 or int(i) >= len(group.mutations) for i in members):
            raise InputFormatError(
                f"Cluster {cluster_id} of group {group.tag} refers to unknown mutations"
            )
        return Cluster.from_members(
            members, group.frequency_table(), cluster_id, min_robust_size
        )
    centroid = np.asarray(entry["centroid"], dtype=float)
    std_dev = entry.get("std_dev")
    return Cluster(
        centroid=centroid,
        std_dev=np.zeros_like(centroid) if std_dev is None else std_dev,
        membership=tuple(members),
        cluster_id=cluster_id,
        robust=bool(entry.get("robust", True)),
    )


def groups_from_mapping(
    mapping: Mapping[str, Mapping[str, Any]],
    num_samples: int,
    min_robust_size: int = 2,
) -> List[Group]:
    """
    Build mutation groups from a plain mapping, e.g. parsed JSON.

    Args:
        mapping: ``{tag: {"mutations": [...], "clusters": [...], "robust": bool}}``.
            A mutation is a frequency list or a dict with ``frequencies`` and
            optional ``id``, ``chromosome``, ``position``, ``description``.
            A cluster is a dict with ``centroid`` (present-sample or full
            width) and optional ``std_dev``, ``members``, ``id``, ``robust``;
            without a centroid its statistics are computed from ``members``.
        num_samples: Total number of samples; every tag must have this width.
        min_robust_size: Robustness threshold for clusters built from members.

    Returns:
        Groups in mapping order.
    """
    groups: List[Group] = []
    for tag, body in mapping.items():
        if len(tag) != num_samples:
            raise InputFormatError(
                f"Group tag {tag!r} has width {len(tag)}; expected {num_samples}"
            )
        if not isinstance(body, Mapping):
            raise InputFormatError(f"Group {tag!r} must map to a dict")
        mutations = tuple(
            _mutation_from_entry(m, i, num_samples)
            for i, m in enumerate(body.get("mutations", ()))
        )
        group = Group(tag=tag, mutations=mutations, robust=bool(body.get("robust", True)))
        clusters = tuple(
            _cluster_from_entry(c, i, group, min_robust_size)
            for i, c in enumerate(body.get("clusters", ()))
        )
        groups.append(group.replacing_clusters((), clusters))
    return groups


def read_groups(path: str, num_samples: int, min_robust_size: int = 2) -> List[Group]:
    with open(path) as f:
        mapping = json.load(f)
    return groups_from_mapping(mapping, num_samples, min_robust_size)


def dump_json(obj: Union[LineageResult, LineageTree, Sequence[Any]], f: IO[str]):
    json.dump(obj, f, cls=LineageEncoder)


def write_json(obj: Union[LineageResult, LineageTree, Sequence[Any]], path: str):
    with open(path, mode="w") as f:
        dump_json(obj, f)


def serialize_trees(trees: Sequence[LineageTree]) -> List[Dict[str, Any]]:
    serialized: List[Dict[str, Any]] = []
    for rank, tree in enumerate(trees):
        d = tree.to_dict()
        d["rank"] = rank
        serialized.append(d)
    return serialized
