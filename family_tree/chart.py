"""Mermaid flowchart definitions for family trees."""

import logging
import re
from typing import Dict, List, Optional, Set

from .boundary import ErrorBoundary
from .domain import ChartType, MemberData, RelationType

log = logging.getLogger(__name__)

EMPTY_CHART = 'graph TD\n  EmptyNode["No family tree data"]'

UNSAFE_CHAR = re.compile(r'[^A-Za-z0-9]')


def node_id(member_id: str) -> str:
    """Mermaid node ids only allow word characters.

    Any other character, underscore included, becomes ``_<hex code>_`` so
    distinct member ids give distinct node ids.
    """
    return 'm_' + UNSAFE_CHAR.sub(lambda match: f'_{ord(match.group()):x}_', member_id)


def label(text: str) -> str:
    return '"' + text.replace('"', '#quot;') + '"'


def children_of(members: List[MemberData]) -> Dict[str, List[MemberData]]:
    children: Dict[str, List[MemberData]] = {}
    for member in members:
        if member.parent_id:
            children.setdefault(member.parent_id, []).append(member)
    return children


def pick_root(members: List[MemberData], root_id: Optional[str]) -> MemberData:
    by_id = {m.id: m for m in members}
    if root_id and root_id in by_id:
        return by_id[root_id]
    # a member without a parent, else the first member
    return next((m for m in members if not m.parent_id), members[0])


def select(members: List[MemberData], chart_type: ChartType,
           root: MemberData) -> List[MemberData]:
    """Members shown for the chart type."""
    if chart_type == 'full':
        return members

    by_id = {m.id: m for m in members}
    keep: Set[str] = set()
    if chart_type == 'ancestry':
        current: Optional[MemberData] = root
        while current is not None and current.id not in keep:
            keep.add(current.id)
            current = by_id.get(current.parent_id) if current.parent_id else None
    else:
        children = children_of(members)
        stack = [root]
        while stack:
            current = stack.pop()
            if current.id in keep:
                continue
            keep.add(current.id)
            stack.extend(children.get(current.id, []))
    return [m for m in members if m.id in keep]


def generate_mermaid_chart(members: List[MemberData], chart_type: ChartType = 'full',
                           root_id: Optional[str] = None) -> str:
    """Flowchart with a node per member and an edge from each parent.

    Parent ids that are not among ``members`` are drawn without an edge.
    """
    if not members:
        return EMPTY_CHART

    root = pick_root(members, root_id)
    shown = select(members, chart_type, root)
    shown_ids = {m.id for m in shown}

    lines = ['flowchart TD']
    for member in shown:
        if member.gender is not None and member.gender.value == 'male':
            lines.append(f'  {node_id(member.id)}([{label(member.name)}])')
        else:
            lines.append(f'  {node_id(member.id)}(({label(member.name)}))')

    couples: Set[frozenset] = set()
    for member in shown:
        if member.parent_id and member.parent_id in shown_ids:
            lines.append(f'  {node_id(member.parent_id)} --> {node_id(member.id)}')
        for rel in member.relationships:
            couple = frozenset((member.id, rel.target_id))
            if rel.type == RelationType.SPOUSE and rel.target_id in shown_ids \
                    and couple not in couples:
                couples.add(couple)
                lines.append(f'  {node_id(member.id)} --- {node_id(rel.target_id)}')
    return '\n'.join(lines)


def render_chart(members: List[MemberData], chart_type: ChartType = 'full',
                 root_id: Optional[str] = None) -> str:
    """``generate_mermaid_chart`` that falls back to the empty chart on error."""
    boundary = ErrorBoundary(lambda ex: EMPTY_CHART, name='chart')
    return boundary.run(generate_mermaid_chart, members, chart_type, root_id)
