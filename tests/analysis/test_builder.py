"""
Tests for StructGraphBuilder.

Builds graphs from the sample package under tests/fixtures and from small
in-memory sources.
"""

import logging

import pytest

from structdoc.analysis.builder import StructGraphBuilder, build_graph, finalize
from structdoc.emit.index import build_index
from structdoc.errors import MissingDocumentationError, NoDocumentableTypesError
from structdoc.models.graph import Field, RecordType
from structdoc.models.text import Example, Text
from structdoc.source.loader import load_source


@pytest.fixture
def sample_graph(sample_package_dir):
    return StructGraphBuilder(load_source(sample_package_dir)).build("Config")


def appearances(record: RecordType) -> list[tuple[str, str]]:
    return [(a.type_name, a.field_name) for a in record.appears_in]


@pytest.mark.analysis
class TestSamplePackage:
    """Tests against the sample configuration package."""

    def test_discovery_order(self, sample_graph):
        """Records are discovered depth-first in member order."""
        assert sample_graph.root == "Config"
        assert sample_graph.names() == [
            "Config",
            "server.ServerConfig",
            "tls.TLSConfig",
            "server.Limits",
            "Backup",
        ]

    def test_root_fields(self, sample_graph):
        """Base and inline fields are flattened into the root."""
        config = sample_graph.get("Config")

        assert [f.tag for f in config.fields] == [
            "version",
            "name",
            "server",
            "backups",
            "labels",
            "driver",
            "path",
            "level",
            "parent",
        ]
        assert [f.type for f in config.fields] == [
            "str",
            "str",
            "server.ServerConfig",
            "[]Backup",
            "map[str]str",
            "str",
            "str",
            "LogLevel",
            "Config",
        ]

    def test_root_text(self, sample_graph):
        """The class docstring documents the record."""
        config = sample_graph.get("Config")

        assert config.text.comment == "Config is the root configuration of the sample application."
        assert config.text.description.endswith("\\n\\nLoaded from config.yaml at startup.")

    def test_field_examples_propagate_to_target(self, sample_graph):
        """Examples on a field are appended to the record it points at."""
        config = sample_graph.get("Config")
        server = sample_graph.get("server.ServerConfig")

        assert [(e.name, e.value) for e in server.text.examples] == [
            ("local", '{"port": 8080}')
        ]
        assert config.text.examples == []
        # The field keeps its own examples
        assert len(config.fields[2].text.examples) == 1

    def test_appearances(self, sample_graph):
        """Back-references follow field order across the graph."""
        assert appearances(sample_graph.get("server.ServerConfig")) == [
            ("Config", "server"),
            ("Backup", "server"),
        ]
        assert appearances(sample_graph.get("tls.TLSConfig")) == [
            ("server.ServerConfig", "tls")
        ]
        assert appearances(sample_graph.get("server.Limits")) == [
            ("server.ServerConfig", "limits")
        ]
        assert appearances(sample_graph.get("Backup")) == [("Config", "backups")]

    def test_self_reference(self, sample_graph):
        """A record referencing itself appears in itself, once."""
        assert appearances(sample_graph.get("Config")) == [("Config", "parent")]
        assert sample_graph.names().count("Config") == 1

    def test_imported_record_fields(self, sample_graph):
        """Fields of records in other modules keep their notes and types."""
        server = sample_graph.get("server.ServerConfig")

        assert [f.tag for f in server.fields] == ["host", "port", "bind", "tls", "limits"]
        assert [f.type for f in server.fields] == [
            "str",
            "int",
            "ipaddress.IPv4Address",
            "tls.TLSConfig",
            "Limits",
        ]
        assert server.fields[1].note == "required"
        assert server.fields[2].type_ref == ""

    def test_values_and_attribute_docstrings(self, sample_graph):
        """Allowed values and attribute docstrings are parsed."""
        tls = sample_graph.get("tls.TLSConfig")

        assert tls.fields[0].text.comment == "CertFile is the path to the PEM certificate."
        assert tls.fields[1].text.values == ["strict", "relaxed"]

    def test_escaped_names(self, sample_graph):
        """Records outside the root module get an upper-case prefix."""
        assert sample_graph.get("Config").get_escaped_name() == "Config"
        assert sample_graph.get("tls.TLSConfig").get_escaped_name() == "TLSTLSConfig"

    def test_case_insensitive_root(self, sample_package_dir):
        """The root name is matched case-insensitively."""
        graph = build_graph(load_source(sample_package_dir), "serverconfig")

        assert graph.names() == ["ServerConfig", "tls.TLSConfig", "Limits"]

    def test_root_module_pinned(self, sample_package_dir):
        """The root module can be named explicitly."""
        source = load_source(sample_package_dir)

        graph = build_graph(source, "Config", "sample_config.config")
        assert graph.names()[0] == "Config"

        with pytest.raises(NoDocumentableTypesError):
            build_graph(source, "Config", "sample_config.server")

    def test_idempotent(self, sample_package_dir):
        """Repeated runs produce identical indexes."""
        first = build_index(build_graph(load_source(sample_package_dir), "Config"))
        second = build_index(build_graph(load_source(sample_package_dir), "Config"))

        assert first.model_dump() == second.model_dump()

    def test_progress_logged(self, sample_package_dir, caplog):
        """Each generated type is reported at INFO."""
        with caplog.at_level(logging.INFO, logger="structdoc.analysis.builder"):
            build_graph(load_source(sample_package_dir), "Config")

        assert 'generating docs for type: "Config"' in caplog.text
        assert 'generating docs for type: "tls.TLSConfig"' in caplog.text


@pytest.mark.analysis
class TestGraphShapes:
    """Tests for cycles, diamonds and failure conditions."""

    def test_diamond(self, make_source):
        """A record reached twice is discovered once and appears twice."""
        source = make_source(
            app__config='''
            class Shared:
                """Shared settings."""

                # Value.
                value: int = field(metadata={"yaml": "value"})


            class A:
                """A settings."""

                # Shared part.
                shared: Shared = field(metadata={"yaml": "shared"})


            class B:
                """B settings."""

                # Shared part.
                common: Shared = field(metadata={"yaml": "common"})


            class Config:
                """Root settings."""

                # A part.
                a: A = field(metadata={"yaml": "a"})
                # B part.
                b: B = field(metadata={"yaml": "b"})
            '''
        )
        graph = build_graph(source, "Config")

        assert graph.names() == ["Config", "A", "Shared", "B"]
        assert appearances(graph.get("Shared")) == [("A", "shared"), ("B", "common")]

    def test_mutual_cycle(self, make_source):
        """Records referencing each other terminate."""
        source = make_source(
            app__config='''
            from typing import Optional

            class Node:
                """A node."""

                # Next node.
                next: Optional["Edge"] = field(metadata={"yaml": "next"})


            class Edge:
                """An edge."""

                # Target node.
                target: Optional[Node] = field(metadata={"yaml": "target"})
            '''
        )
        graph = build_graph(source, "Node")

        assert graph.names() == ["Node", "Edge"]
        assert appearances(graph.get("Node")) == [("Edge", "target")]
        assert appearances(graph.get("Edge")) == [("Node", "next")]

    def test_same_name_in_modules_sharing_a_base(self, make_source, caplog):
        """Records are told apart by their full module, not the module base."""
        source = make_source(
            app__config='''
            from app.a.types import Limits as ApiLimits
            from app.b.types import Limits as DbLimits

            class Config:
                """Root settings."""

                # API limits.
                api: ApiLimits = field(metadata={"yaml": "api"})
                # Database limits.
                db: DbLimits = field(metadata={"yaml": "db"})
            ''',
            app__a__types='''
            class Limits:
                """API limits."""

                # Requests per second.
                rate: int = field(metadata={"yaml": "rate"})
            ''',
            app__b__types='''
            class Limits:
                """Database limits."""

                # Connection pool size.
                pool: int = field(metadata={"yaml": "pool"})
            ''',
        )
        with caplog.at_level(logging.WARNING, logger="structdoc.analysis.builder"):
            graph = build_graph(source, "Config")

        api, db = graph.types[1:]
        assert [r.key for r in graph] == [
            "app.config.Config",
            "app.a.types.Limits",
            "app.b.types.Limits",
        ]
        assert [f.tag for f in api.fields] == ["rate"]
        assert [f.tag for f in db.fields] == ["pool"]
        assert appearances(api) == [("Config", "api")]
        assert appearances(db) == [("Config", "db")]
        assert "both documented as 'types.Limits'" in caplog.text

    def test_excluded_field_does_not_reach_record(self, make_source):
        """A docgen:nodoc field typed with a record leaves it undocumented."""
        source = make_source(
            app__config='''
            class Secret:
                """Credentials."""

                # Password.
                password: str = field(metadata={"yaml": "password"})


            class Config:
                """Root settings."""

                # Name of the deployment.
                name: str = field(metadata={"yaml": "name"})
                # Credentials. docgen:nodoc
                secret: Secret = field(metadata={"yaml": "secret"})
            '''
        )
        graph = build_graph(source, "Config")

        assert graph.names() == ["Config"]
        assert graph.get("Secret") is None
        assert [f.tag for f in graph.get("Config").fields] == ["name"]
        assert all(not record.appears_in for record in graph)

    def test_prose_comment_with_colon(self, make_source):
        """A comment that reads like a YAML key still documents the field."""
        source = make_source(
            app__config='''
            class Config:
                """Root settings."""

                # Default: 8080 when unset.
                port: int = field(metadata={"yaml": "port"})
            '''
        )
        graph = build_graph(source, "Config")

        port = graph.get("Config").fields[0]
        assert port.text.comment == "Default: 8080 when unset."
        assert port.text.description == "Default: 8080 when unset."

    def test_missing_documentation_aborts(self, make_source):
        """An undocumented field anywhere in the graph is fatal."""
        source = make_source(
            app__config='''
            class Inner:
                """Inner settings."""

                value: int = field(metadata={"yaml": "value"})


            class Config:
                """Root settings."""

                # Inner part.
                inner: Inner = field(metadata={"yaml": "inner"})
            '''
        )
        with pytest.raises(MissingDocumentationError, match="'value' of type 'Inner'"):
            build_graph(source, "Config")

    def test_no_fields_anywhere(self, make_source):
        """A root with nothing documentable is a zero-result error."""
        source = make_source(
            app__config='''
            class Config:
                """Root settings."""

                runtime: dict = field(default_factory=dict)
            '''
        )
        with pytest.raises(NoDocumentableTypesError, match="'Config'"):
            build_graph(source, "Config")

    def test_unknown_root(self, make_source):
        """A root that does not exist is a zero-result error."""
        source = make_source(app__config="X = 1\n")

        with pytest.raises(NoDocumentableTypesError, match="'Missing'"):
            build_graph(source, "Missing")

    def test_private_root_not_found(self, make_source):
        """Only exported classes can be roots."""
        source = make_source(
            app__config='''
            class _Config:
                """Root settings."""

                # Name.
                name: str = field(metadata={"yaml": "name"})
            '''
        )
        with pytest.raises(NoDocumentableTypesError):
            build_graph(source, "_Config")


@pytest.mark.analysis
class TestFinalize:
    """Tests for the finalize pass on hand-built records."""

    def test_examples_are_copies(self):
        """Propagated examples are independent copies."""
        target = RecordType(name="Target")
        example = Example(name="one", value="1")
        owner = RecordType(
            name="Owner",
            fields=[
                Field(
                    name="t",
                    tag="t",
                    type="Target",
                    type_ref="Target",
                    text=Text(examples=[example]),
                    target="Target",
                )
            ],
        )
        finalize([owner, target])

        assert target.text.examples == [example]
        assert target.text.examples[0] is not example
        assert appearances(target) == [("Owner", "t")]

    def test_fields_without_target_are_ignored(self):
        """Fields that resolve to nothing leave the graph untouched."""
        record = RecordType(name="Owner", fields=[Field(name="x", tag="x", type="int")])
        finalize([record])

        assert record.appears_in == []
