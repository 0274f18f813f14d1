"""
Graph construction for the contacts leak.

  1. read_leak       : CSV → accepted ContactRecords (parse.py)
  2. add_record      : dedup people by phone, count (owner, contact) pairs
  3. build           : flatten the accumulated DiGraph into a ContactGraph
"""

from typing import Iterable

import networkx as nx
from tqdm.auto import tqdm

from logger import get_logger
from models import ContactGraph, ContactRecord, Edge, GraphMeta, Person
from parse import LeakFile, read_leak

logger = get_logger(__name__)


class ContactGraphBuilder:
    """
    Accumulates leak records into a directed graph keyed by phone number.

    Node attributes hold the first Person seen for a phone; later rows never
    overwrite them. Edge attribute ``weight`` counts every row seen for the
    ordered (owner, contact) pair, self-loops included.
    """

    def __init__(self):
        self.G = nx.DiGraph()

    def _add_person(self, phone: str, **attrs):
        if phone not in self.G:
            self.G.add_node(phone, **attrs)

    def add_record(self, record: ContactRecord):
        self._add_person(
            record.owner_phone,
            name=record.owner_name,
            location=record.owner_location or None,
        )
        # Contacts never get a location, even when one could be inferred
        self._add_person(record.contact_phone, name=record.contact_name, location=None)

        owner, contact = record.owner_phone, record.contact_phone
        if self.G.has_edge(owner, contact):
            self.G[owner][contact]["weight"] += 1
        else:
            self.G.add_edge(owner, contact, weight=1)

    def add_records(self, records: Iterable[ContactRecord]):
        for record in records:
            self.add_record(record)

    def build(self, source: str, rows: int) -> ContactGraph:
        """Materialise nodes and edges, sorted so repeated runs match byte for byte."""
        nodes = [
            Person(name=d["name"], phone=phone, location=d["location"])
            for phone, d in sorted(self.G.nodes(data=True))
        ]
        edges = [
            Edge(owner_phone=u, contact_phone=v, weight=w)
            for u, v, w in sorted(self.G.edges(data="weight"))
        ]
        return ContactGraph(
            nodes=nodes,
            edges=edges,
            meta=GraphMeta(source=source, rows=max(rows, 0)),
        )


def build_graph(leak: LeakFile, progress: bool = False) -> ContactGraph:
    """Run the builder over every accepted record of a loaded leak file."""
    builder = ContactGraphBuilder()
    builder.add_records(tqdm(leak.records, desc="  Rows", disable=not progress))

    graph = builder.build(source=leak.source, rows=leak.rows)
    logger.info(f"nodes: {len(graph.nodes)} edges: {len(graph.edges)}")
    return graph


def extract_graph(path: str, progress: bool = False) -> ContactGraph:
    """Leak file path in, contact graph out."""
    logger.info(f"reading leak file: {path}")
    return build_graph(read_leak(path), progress=progress)
