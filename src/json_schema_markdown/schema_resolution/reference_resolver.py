"""Draft-3 and draft-4 `$ref` resolution into an inlined schema plus a type registry."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urldefrag, urljoin, urlsplit
from urllib.request import url2pathname

import jsonpointer
from jsonpointer import JsonPointerException

from .document_loader import load_schema_file
from .schema_models import RegisteredType, ResolvedSchema, SchemaNode

LOGGER = logging.getLogger("json_schema_markdown.schema_resolution")

DRAFT3_SCHEMA_URI = "http://json-schema.org/draft-03/schema"
DRAFT4_SCHEMA_URI = "http://json-schema.org/draft-04/schema"

DocumentLoader = Callable[[Path], dict[str, Any]]
Location = tuple[str, str]

_SCHEMA_MAP_KEYWORDS = ("properties", "patternProperties", "definitions")
_SCHEMA_VALUE_KEYWORDS = ("additionalProperties", "additionalItems", "not")
_SCHEMA_LIST_KEYWORDS = ("anyOf", "oneOf")


class SchemaResolutionError(Exception):
    """Raised when a reference cannot be followed to a local schema."""


class _SchemaResolver:
    """Shared resolution walk; subclasses supply the draft-specific rules."""

    draft_name = ""
    merge_keyword = ""

    def __init__(
        self,
        base_path: Path | str = "",
        *,
        debug: bool = False,
        load_document: DocumentLoader = load_schema_file,
    ) -> None:
        self._base_path = Path(base_path or ".").resolve()
        self._debug = debug
        self._load_document = load_document
        self._documents: dict[str, SchemaNode] = {}
        self._file_names: dict[str, str] = {}
        self._id_index: dict[str, Location] = {}
        self._remote_bases: list[tuple[str, str]] = []
        self._resolved: dict[Location, SchemaNode] = {}
        self._in_progress: dict[Location, SchemaNode] = {}
        self._incomplete: dict[int, list[Callable[[], None]]] = {}
        self._ref_chain: set[Location] = set()
        self._registry: dict[str, RegisteredType] = {}

    def resolve(self, schema: Mapping[str, Any], file_name: str = "") -> ResolvedSchema:
        """Inline every reference reachable from `schema` and collect titled schemas."""
        if file_name:
            root_uri = (self._base_path / file_name).resolve().as_uri()
        else:
            root_uri = self._base_path.as_uri() + "/"
        self._add_document(root_uri, copy.deepcopy(dict(schema)), file_name=file_name)
        self._trace("resolving %s as %s", file_name or "<inline schema>", self.draft_name)

        root = self._resolve_location(root_uri, "")
        self._release_incomplete()
        return ResolvedSchema(schema=root, registry=dict(self._registry))

    # Draft-specific hooks.

    def _scope(self, node: Mapping[str, Any], parent_scope: str) -> str:
        return parent_scope

    def _index_ids(self, document: SchemaNode, doc_uri: str) -> None:
        return None

    def _plain_name_location(self, target_doc: str, fragment: str) -> Location:
        raise SchemaResolutionError(
            f"{self.draft_name} references must use JSON pointers, got '#{fragment}'."
        )

    def _normalize(self, node: SchemaNode) -> None:
        return None

    # Walk.

    def _resolve_location(self, doc_uri: str, pointer: str) -> SchemaNode:
        key = (doc_uri, pointer)
        if key in self._resolved:
            return self._resolved[key]
        if key in self._in_progress:
            self._trace("cycle detected at %s#%s", self._file_names[doc_uri], pointer)
            return self._in_progress[key]
        raw, parent_scope = self._navigate(doc_uri, pointer)
        return self._resolve_node(raw, doc_uri, pointer, parent_scope)

    def _resolve_node(
        self, raw: Mapping[str, Any], doc_uri: str, pointer: str, parent_scope: str
    ) -> SchemaNode:
        key = (doc_uri, pointer)
        if key in self._resolved:
            return self._resolved[key]
        if key in self._in_progress:
            return self._in_progress[key]

        scope = self._scope(raw, parent_scope)
        if isinstance(raw.get("$ref"), str):
            return self._resolve_reference(raw, doc_uri, pointer, scope)

        result: SchemaNode = {}
        self._in_progress[key] = result
        self._incomplete[id(result)] = []
        self._fill(raw, result, doc_uri, pointer, scope)
        del self._in_progress[key]

        self._resolved[key] = result
        self._register(raw, result, doc_uri)
        self._settle(result)
        return result

    def _resolve_reference(
        self, raw: Mapping[str, Any], doc_uri: str, pointer: str, scope: str
    ) -> SchemaNode:
        key = (doc_uri, pointer)
        ref = raw["$ref"]
        if key in self._ref_chain:
            raise SchemaResolutionError(
                f"Circular $ref chain through '{ref}' in {self._file_names[doc_uri]}."
            )

        target_doc, fragment = urldefrag(urljoin(scope, ref))
        target_uri, target_pointer = self._locate(target_doc, unquote(fragment))
        self._trace(
            "%s#%s -> %s#%s",
            self._file_names[doc_uri],
            pointer,
            self._file_names[target_uri],
            target_pointer,
        )

        self._ref_chain.add(key)
        target = self._resolve_location(target_uri, target_pointer)
        self._ref_chain.discard(key)

        siblings = {name: value for name, value in raw.items() if name not in ("$ref", "id")}
        if not siblings:
            self._resolved[key] = target
            return target

        # Filled once the target is complete; a target that is still being
        # resolved would otherwise be copied half-built.
        result: SchemaNode = {}
        self._resolved[key] = result
        self._incomplete[id(result)] = []
        overlay: SchemaNode = {}
        self._fill(siblings, overlay, doc_uri, pointer, scope)
        self._register(raw, result, doc_uri)
        self._when_complete([target], lambda: self._apply_overlay(result, target, overlay))
        return result

    def _apply_overlay(self, result: SchemaNode, target: SchemaNode, overlay: SchemaNode) -> None:
        result.update(target)
        result.update(overlay)
        self._settle(result)

    def _settle(self, node: SchemaNode) -> None:
        """Merge bases into `node` as soon as all of them are complete."""
        bases = node.get(self.merge_keyword)
        if isinstance(bases, Mapping):
            bases = [bases]
        waiting_on = [
            base for base in bases or () if isinstance(base, Mapping) and base is not node
        ]
        self._when_complete(waiting_on, lambda: self._finish(node))

    def _finish(self, node: SchemaNode) -> None:
        self._merge_bases(node)
        self._normalize(node)
        for callback in self._incomplete.pop(id(node), []):
            callback()

    def _when_complete(
        self, nodes: list[Mapping[str, Any]], callback: Callable[[], None]
    ) -> None:
        for node in nodes:
            if id(node) in self._incomplete:
                self._incomplete[id(node)].append(lambda: self._when_complete(nodes, callback))
                return
        callback()

    def _release_incomplete(self) -> None:
        # Whatever is still waiting depends on itself through extends/allOf;
        # it is merged with the partial bases it can see.
        if self._incomplete:
            LOGGER.warning(
                "Circular %s chain; merging partially resolved bases.", self.merge_keyword
            )
        while self._incomplete:
            node_id = next(iter(self._incomplete))
            for callback in self._incomplete.pop(node_id):
                callback()

    def _fill(
        self,
        raw: Mapping[str, Any],
        result: SchemaNode,
        doc_uri: str,
        pointer: str,
        scope: str,
    ) -> None:
        for key, value in raw.items():
            if key == "$ref":
                continue
            child_pointer = f"{pointer}/{jsonpointer.escape(key)}"
            if key in (*_SCHEMA_MAP_KEYWORDS, "dependencies") and isinstance(value, Mapping):
                result[key] = {
                    name: self._resolve_child(
                        child, doc_uri, f"{child_pointer}/{jsonpointer.escape(name)}", scope
                    )
                    for name, child in value.items()
                }
            elif key in _SCHEMA_VALUE_KEYWORDS and isinstance(value, Mapping):
                result[key] = self._resolve_node(value, doc_uri, child_pointer, scope)
            elif key in ("items", self.merge_keyword, *_SCHEMA_LIST_KEYWORDS):
                if isinstance(value, Mapping):
                    result[key] = self._resolve_node(value, doc_uri, child_pointer, scope)
                elif isinstance(value, list):
                    result[key] = [
                        self._resolve_child(child, doc_uri, f"{child_pointer}/{index}", scope)
                        for index, child in enumerate(value)
                    ]
                else:
                    result[key] = value
            else:
                result[key] = value

    def _resolve_child(self, child: Any, doc_uri: str, pointer: str, scope: str) -> Any:
        if isinstance(child, Mapping):
            return self._resolve_node(child, doc_uri, pointer, scope)
        return child

    def _merge_bases(self, node: SchemaNode) -> None:
        bases = node.pop(self.merge_keyword, None)
        if bases is None:
            return
        if isinstance(bases, Mapping):
            bases = [bases]
        for base in bases:
            if isinstance(base, Mapping) and base is not node:
                _merge_base(node, base, self.merge_keyword)

    def _register(self, raw: Mapping[str, Any], node: SchemaNode, doc_uri: str) -> None:
        title = raw.get("title")
        if not isinstance(title, str):
            return
        file_name = self._file_names[doc_uri]
        existing = self._registry.get(title)
        if existing is not None and existing.schema is not node:
            LOGGER.warning(
                "Schema title '%s' is declared more than once; keeping the one from %s.",
                title,
                file_name or "<inline schema>",
            )
        self._registry[title] = RegisteredType(schema=node, file_name=file_name)
        self._trace("registered type '%s' from %s", title, file_name or "<inline schema>")

    # Addressing.

    def _locate(self, target_doc: str, fragment: str) -> Location:
        if fragment and not fragment.startswith("/"):
            return self._plain_name_location(target_doc, fragment)
        if target_doc in self._id_index:
            doc_uri, base_pointer = self._id_index[target_doc]
            return doc_uri, base_pointer + fragment
        return self._load(target_doc), fragment

    def _load(self, target_doc: str) -> str:
        parts = urlsplit(target_doc)
        if parts.scheme == "file":
            path = Path(url2pathname(parts.path))
        else:
            path = self._map_remote(target_doc)
        doc_uri = path.resolve().as_uri()
        if doc_uri not in self._documents:
            self._trace("loading %s", path)
            self._add_document(doc_uri, self._load_document(path))
        if target_doc != doc_uri:
            self._id_index[target_doc] = (doc_uri, "")
        return doc_uri

    def _map_remote(self, target_doc: str) -> Path:
        for remote_base, local_uri in self._remote_bases:
            remote_dir = remote_base.rsplit("/", 1)[0] + "/"
            if target_doc.startswith(remote_dir):
                local = urljoin(local_uri, target_doc[len(remote_dir) :])
                return Path(url2pathname(urlsplit(local).path))
        raise SchemaResolutionError(
            f"Cannot resolve remote reference '{target_doc}'; "
            "only local schema files are supported."
        )

    def _add_document(
        self, doc_uri: str, document: SchemaNode, *, file_name: str | None = None
    ) -> None:
        self._documents[doc_uri] = document
        self._file_names[doc_uri] = (
            file_name if file_name is not None else self._relative_name(doc_uri)
        )
        self._id_index[doc_uri] = (doc_uri, "")
        self._index_ids(document, doc_uri)

    def _relative_name(self, doc_uri: str) -> str:
        path = Path(url2pathname(urlsplit(doc_uri).path))
        try:
            return path.relative_to(self._base_path).as_posix()
        except ValueError:
            return path.name

    def _navigate(self, doc_uri: str, pointer: str) -> tuple[Mapping[str, Any], str]:
        node: Any = self._documents[doc_uri]
        scope = doc_uri
        try:
            json_pointer = jsonpointer.JsonPointer(pointer)
            for token in json_pointer.parts:
                if isinstance(node, Mapping):
                    scope = self._scope(node, scope)
                elif not isinstance(node, list):
                    raise JsonPointerException(f"cannot step into '{token}'")
                node = json_pointer.walk(node, token)
        except JsonPointerException as exc:
            raise SchemaResolutionError(
                f"Cannot resolve pointer '#{pointer}' in {self._file_names[doc_uri]}."
            ) from exc
        if not isinstance(node, Mapping):
            raise SchemaResolutionError(
                f"Pointer '#{pointer}' in {self._file_names[doc_uri]} does not point at a schema."
            )
        return node, scope

    def _trace(self, message: str, *args: Any) -> None:
        if self._debug:
            LOGGER.debug(message, *args)


class Draft3Resolver(_SchemaResolver):
    """Draft 3: `$ref` is relative to the referring file, `extends` is merged in."""

    draft_name = "draft-03"
    merge_keyword = "extends"


class Draft4Resolver(_SchemaResolver):
    """Draft 4: `id` sets the resolution scope, `allOf` is merged, `required` lists are applied."""

    draft_name = "draft-04"
    merge_keyword = "allOf"

    def _scope(self, node: Mapping[str, Any], parent_scope: str) -> str:
        schema_id = node.get("id")
        if not isinstance(schema_id, str):
            return parent_scope
        base, _ = urldefrag(urljoin(parent_scope, schema_id))
        return base or parent_scope

    def _index_ids(self, document: SchemaNode, doc_uri: str) -> None:
        for node, pointer, parent_scope in _iter_schemas(document, "", doc_uri, self._scope):
            schema_id = node.get("id")
            if not isinstance(schema_id, str):
                continue
            base, fragment = urldefrag(urljoin(parent_scope, schema_id))
            if fragment:
                self._id_index[f"{base}#{fragment}"] = (doc_uri, pointer)
                continue
            self._id_index.setdefault(base, (doc_uri, pointer))
            if not pointer and urlsplit(base).scheme not in ("", "file"):
                self._remote_bases.append((base, doc_uri))

    def _plain_name_location(self, target_doc: str, fragment: str) -> Location:
        location = self._id_index.get(f"{target_doc}#{fragment}")
        if location is None:
            self._locate(target_doc, "")
            location = self._id_index.get(f"{target_doc}#{fragment}")
        if location is None:
            raise SchemaResolutionError(f"No schema declares id '#{fragment}' in {target_doc}.")
        return location

    def _normalize(self, node: SchemaNode) -> None:
        required = node.get("required")
        properties = node.get("properties")
        if not isinstance(required, list) or not isinstance(properties, Mapping):
            return
        node["properties"] = dict(properties)
        for name, prop in properties.items():
            if name in required and isinstance(prop, Mapping):
                self._when_complete(
                    [prop], lambda name=name, prop=prop: _mark_required(node, name, prop)
                )


def select_resolver(schema_uri: Any) -> tuple[type[_SchemaResolver], bool]:
    """Pick the resolver for a `$schema` value; the flag is False when falling back."""
    normalized = schema_uri.rstrip("#") if isinstance(schema_uri, str) else None
    if normalized == DRAFT3_SCHEMA_URI:
        return Draft3Resolver, True
    if normalized == DRAFT4_SCHEMA_URI:
        return Draft4Resolver, True
    return Draft3Resolver, False


def resolve_schema(
    schema: Mapping[str, Any],
    file_name: str = "",
    base_path: Path | str = "",
    debug: bool = False,
    *,
    load_document: DocumentLoader = load_schema_file,
) -> ResolvedSchema:
    """Resolve `schema` with the resolver matching its declared draft."""
    resolver_cls, supported = select_resolver(schema.get("$schema"))
    if not supported:
        LOGGER.warning(
            "Unsupported $schema %r in %s; treating it as draft 3.",
            schema.get("$schema"),
            file_name or "<inline schema>",
        )
    resolver = resolver_cls(base_path, debug=debug, load_document=load_document)
    resolved = resolver.resolve(schema, file_name)
    return ResolvedSchema(
        schema=resolved.schema, registry=resolved.registry, draft_supported=supported
    )


def _merge_base(node: SchemaNode, base: Mapping[str, Any], merge_keyword: str) -> None:
    for key, value in base.items():
        if key in ("id", merge_keyword):
            continue
        if key == "properties" and isinstance(value, Mapping):
            node["properties"] = {**value, **node.get("properties", {})}
        elif key == "required" and isinstance(value, list):
            own_required = node.get("required")
            if isinstance(own_required, list):
                node["required"] = list(dict.fromkeys([*value, *own_required]))
            elif own_required is None:
                node["required"] = value
        elif key not in node:
            node[key] = value


def _mark_required(node: SchemaNode, name: str, prop: Mapping[str, Any]) -> None:
    # Copy, so a shared $ref target is not flagged for every referrer.
    node["properties"][name] = {**prop, "required": True}


def _iter_schemas(
    node: Mapping[str, Any],
    pointer: str,
    parent_scope: str,
    scope_of: Callable[[Mapping[str, Any], str], str],
) -> Iterator[tuple[Mapping[str, Any], str, str]]:
    yield node, pointer, parent_scope
    scope = scope_of(node, parent_scope)
    for key, value in node.items():
        child_pointer = f"{pointer}/{jsonpointer.escape(key)}"
        if key in (*_SCHEMA_MAP_KEYWORDS, "dependencies") and isinstance(value, Mapping):
            for name, child in value.items():
                if isinstance(child, Mapping):
                    yield from _iter_schemas(
                        child, f"{child_pointer}/{jsonpointer.escape(name)}", scope, scope_of
                    )
        elif key in (*_SCHEMA_VALUE_KEYWORDS, "items", "extends", "allOf", *_SCHEMA_LIST_KEYWORDS):
            if isinstance(value, Mapping):
                yield from _iter_schemas(value, child_pointer, scope, scope_of)
            elif isinstance(value, list):
                for index, child in enumerate(value):
                    if isinstance(child, Mapping):
                        yield from _iter_schemas(child, f"{child_pointer}/{index}", scope, scope_of)
