"""Tests for loading entity classes from YAML metadata."""

from pathlib import Path
from uuid import UUID

import pytest
from pydantic import ValidationError

from entityforge.entity import Entity, MetadataLoader, schema_of

REPO_METADATA = Path(__file__).resolve().parents[2] / "metadata"


def write_entity(tmp_path: Path, filename: str, content: str) -> None:
    entities = tmp_path / "entities"
    entities.mkdir(exist_ok=True)
    (entities / filename).write_text(content)


@pytest.fixture
def loader(tmp_path):
    write_entity(
        tmp_path,
        "post.yaml",
        """
entity: BlogPost
pluralName: BlogPosts
fields:
  - name: id
    type: uuid
    primaryKey: true
  - name: title
    type: string
    displayName: Headline
    required: true
  - name: draft
    type: boolean
  - name: score
    type: number
    default: 2.5
  - name: postedOn
    type: date
""",
    )
    write_entity(
        tmp_path,
        "tag.yaml",
        """
entity: Tag
idField: code
fields:
  - name: code
    type: string
  - name: count
    type: integer
""",
    )
    loader = MetadataLoader(tmp_path)
    loader.load_all()
    return loader


class TestMetadataLoader:
    def test_lists_entities(self, loader):
        assert sorted(loader.list_entities()) == ["BlogPost", "Tag"]

    def test_builds_entity_subclass(self, loader):
        cls = loader.get_entity("BlogPost")
        assert issubclass(cls, Entity)
        assert cls.__name__ == "BlogPost"

        schema = schema_of(cls)
        assert schema.name_plural() == "BlogPosts"
        assert schema.slug_plural == "blog-posts"
        assert schema.column_names() == ["id", "title", "draft", "score", "postedOn"]
        assert schema.get_field("title").display_name == "Headline"
        assert schema.get_field("postedOn").type == "date"

    def test_field_defaults(self, loader):
        cls = loader.get_entity("BlogPost")
        post = cls(title="Hello")
        assert isinstance(post.id, UUID)
        assert post.draft is False
        assert post.score == 2.5
        assert post.postedOn is None

    def test_required_field(self, loader):
        with pytest.raises(ValidationError):
            loader.get_entity("BlogPost")()

    def test_id_field_key(self, loader):
        schema = schema_of(loader.get_entity("Tag"))
        assert schema.id_field == "code"
        assert schema.name_plural() == "Tags"

    def test_unknown_entity(self, loader):
        assert loader.get_entity("Nope") is None

    def test_unknown_type(self, tmp_path):
        write_entity(
            tmp_path,
            "bad.yaml",
            "entity: Bad\nfields:\n  - name: id\n    type: uuid\n    primaryKey: true\n"
            "  - name: x\n    type: money\n",
        )
        with pytest.raises(ValueError, match="unknown type 'money'"):
            MetadataLoader(tmp_path).load_all()

    def test_duplicate_entity(self, tmp_path):
        content = "entity: Dup\nfields:\n  - name: id\n    type: integer\n    primaryKey: true\n"
        write_entity(tmp_path, "a.yaml", content)
        write_entity(tmp_path, "b.yaml", content)
        with pytest.raises(ValueError, match="more than once"):
            MetadataLoader(tmp_path).load_all()

    def test_missing_directory(self, tmp_path):
        loader = MetadataLoader(tmp_path / "nowhere")
        loader.load_all()
        assert loader.list_entities() == []

    def test_integer_id_is_optional(self, tmp_path):
        write_entity(
            tmp_path,
            "item.yaml",
            "entity: Item\nfields:\n  - name: id\n    type: integer\n    primaryKey: true\n",
        )
        loader = MetadataLoader(tmp_path)
        loader.load_all()
        assert loader.get_entity("Item")().id is None


class TestRepositoryMetadata:
    def test_sample_entities_load(self):
        loader = MetadataLoader(REPO_METADATA)
        loader.load_all()
        assert sorted(loader.list_entities()) == ["Article", "Tag"]
        schema = schema_of(loader.get_entity("Article"))
        assert schema.get_field("cover").field_type.upload
