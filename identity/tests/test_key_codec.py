"""Tests for node identifier encoding, decoding and minting."""

import hashlib
import re
import unittest
from types import SimpleNamespace

from identity.config import DEFAULT_DIGEST_LENGTH
from identity.errors import IdentifierDecodeError, IdentifierEncodeError, IdentifierError
from identity.format_validator import validate
from identity.key_codec import (
    decode,
    encode,
    escape_field,
    generate_annotation_id,
    generate_class_id,
    generate_field_id,
    generate_method_id,
    generate_operation_id,
    generate_package_id,
    generate_repository_id,
    generate_subproject_id,
    generate_upsert_audit_id,
    is_consistent_id,
    make_digest,
    make_parameter_hash,
    make_path_hash,
    unescape_field,
)
from identity.node_types import NodeType

_HEX_RE = re.compile(r"[0-9a-f]+")


class TestEncodeDecode(unittest.TestCase):
    """encode/decode are exact inverses and keep empty segments."""

    def test_round_trip_keeps_empty_segments(self) -> None:
        cases = [
            (NodeType.CLASS, ("", "Foo")),
            (NodeType.METHOD, ("", "Widget", "run", "0123abcd")),
            (NodeType.FIELD, ("com.acme", "Widget", "count", "")),
            (NodeType.PACKAGE, ("",)),
            (NodeType.REPOSITORY, ("billing", "89abcdef01234567")),
            (NodeType.ANNOTATION, ("com.acme.Audited",)),
            (NodeType.SUBPROJECT, ("core", "0123abcd", "")),
            (NodeType.UPSERT_AUDIT, ("op1", "Class", "x")),
        ]
        for node_type, fields in cases:
            with self.subTest(node_type=node_type):
                node_type_out, fields_out = decode(encode(node_type, fields))
                self.assertEqual((node_type_out, fields_out), (node_type, fields))
        self.assertEqual({node_type for node_type, _ in cases}, set(NodeType))

    def test_encode_shapes(self) -> None:
        self.assertEqual(encode(NodeType.CLASS, ("", "Foo")), "class::Foo")
        self.assertEqual(
            encode(NodeType.METHOD, ("com.acme", "Widget", "run", "0123abcd")),
            "method:com.acme:Widget:run:0123abcd",
        )
        self.assertEqual(
            encode(NodeType.SUBPROJECT, ("core", "0123abcd", "modules/api")),
            "subproject:repo:core:0123abcd:modules/api",
        )
        self.assertEqual(encode(NodeType.PACKAGE, (None,)), "package:")

    def test_encode_is_idempotent(self) -> None:
        fields = ("com.acme", "Widget")
        self.assertEqual(encode(NodeType.CLASS, fields), encode(NodeType.CLASS, fields))

    def test_encode_rejects_colon_in_field(self) -> None:
        with self.assertRaises(IdentifierEncodeError):
            encode(NodeType.CLASS, ("com.acme", "Outer:Inner"))

    def test_encode_rejects_wrong_field_count(self) -> None:
        with self.assertRaises(IdentifierEncodeError):
            encode(NodeType.CLASS, ("com.acme",))
        with self.assertRaises(IdentifierEncodeError):
            encode(NodeType.PACKAGE, ("a", "b"))

    def test_encode_rejects_grammar_violation(self) -> None:
        # Parameter hash must be lowercase hex.
        with self.assertRaises(IdentifierEncodeError):
            encode(NodeType.METHOD, ("com.acme", "Widget", "run", "XYZ"))
        # Class name must be non-empty.
        with self.assertRaises(IdentifierEncodeError):
            encode(NodeType.CLASS, ("com.acme", ""))

    def test_encode_rejects_unknown_type(self) -> None:
        with self.assertRaises(IdentifierEncodeError):
            encode("CLASS", ("", "Foo"))  # type: ignore[arg-type]

    def test_decode_errors(self) -> None:
        bad_ids = [
            "",
            "   ",
            "foo:bar",
            "class:Foo",
            "subproject:core:abc:x",
            "upsert_audit:a:b:c:d",
        ]
        for node_id in bad_ids:
            with self.subTest(node_id=node_id):
                with self.assertRaises(IdentifierDecodeError):
                    decode(node_id)

    def test_errors_are_value_errors(self) -> None:
        self.assertTrue(issubclass(IdentifierEncodeError, IdentifierError))
        self.assertTrue(issubclass(IdentifierDecodeError, ValueError))


class TestEscaping(unittest.TestCase):
    def test_escape_removes_separator(self) -> None:
        escaped = escape_field("class:com.example:Test")
        self.assertNotIn(":", escaped)
        self.assertEqual(unescape_field(escaped), "class:com.example:Test")

    def test_escape_handles_literal_percent(self) -> None:
        raw = "50%3A:done%"
        self.assertEqual(unescape_field(escape_field(raw)), raw)


class TestDigests(unittest.TestCase):
    def test_make_digest_matches_truncated_sha1(self) -> None:
        expected = hashlib.sha1(b"abc").hexdigest()[:DEFAULT_DIGEST_LENGTH]
        self.assertEqual(make_digest("abc"), expected)

    def test_make_digest_length_is_clamped(self) -> None:
        self.assertEqual(len(make_digest("abc", 4)), 8)
        self.assertEqual(len(make_digest("abc", 100)), 40)
        self.assertTrue(_HEX_RE.fullmatch(make_digest("abc", 12)))

    def test_parameterless_methods_hash_to_hex(self) -> None:
        self.assertEqual(make_parameter_hash([]), make_parameter_hash(None))
        self.assertEqual(make_parameter_hash([]), make_digest("()"))
        self.assertTrue(_HEX_RE.fullmatch(make_parameter_hash([])))

    def test_path_hash_ignores_separator_style(self) -> None:
        self.assertEqual(make_path_hash("/path/to/repo/"), make_path_hash("path\\to\\repo"))


class TestMintingHelpers(unittest.TestCase):
    """Per-type minting helpers normalize input and validate their output."""

    def setUp(self) -> None:
        self.class_id = "class:com.example.service:UserService"

    def test_generate_class_id(self) -> None:
        self.assertEqual(
            generate_class_id("com.example.service", "UserService"),
            "class:com.example.service:UserService",
        )
        self.assertEqual(generate_class_id("", "UserService"), "class::UserService")
        self.assertEqual(generate_class_id(None, "UserService"), "class::UserService")

    def test_generate_class_id_requires_name(self) -> None:
        for name in (None, "", "   "):
            with self.subTest(name=name):
                with self.assertRaises(IdentifierEncodeError):
                    generate_class_id("com.example", name)  # type: ignore[arg-type]

    def test_generate_class_id_rejects_colon_in_name(self) -> None:
        with self.assertRaises(IdentifierEncodeError):
            generate_class_id("com.example", "Outer:Inner")

    def test_generate_method_id_with_parameters(self) -> None:
        method_id = generate_method_id(self.class_id, "updateUser", ["String", "Integer", "boolean"])
        prefix = "method:com.example.service:UserService:updateUser:"
        self.assertTrue(method_id.startswith(prefix))
        param_hash = method_id[len(prefix):]
        self.assertEqual(len(param_hash), DEFAULT_DIGEST_LENGTH)
        self.assertTrue(validate(method_id, NodeType.METHOD).valid)

    def test_generate_method_id_without_parameters_is_valid(self) -> None:
        with_none = generate_method_id(self.class_id, "getUsers", None)
        with_empty = generate_method_id(self.class_id, "getUsers", [])
        self.assertEqual(with_none, with_empty)
        self.assertTrue(validate(with_none, NodeType.METHOD).valid)

    def test_overloads_get_distinct_ids(self) -> None:
        id1 = generate_method_id(self.class_id, "test", ["String"])
        id2 = generate_method_id(self.class_id, "test", ["Integer"])
        self.assertNotEqual(id1, id2)

    def test_generic_arguments_do_not_split_overloads(self) -> None:
        id1 = generate_method_id(self.class_id, "load", ["List<String>"])
        id2 = generate_method_id(self.class_id, "load", ["List < Integer >"])
        self.assertEqual(id1, id2)

    def test_generate_method_id_invalid_class_id(self) -> None:
        with self.assertRaises(IdentifierEncodeError):
            generate_method_id("invalid", "method")
        with self.assertRaises(IdentifierEncodeError):
            generate_method_id("package:com.example", "method")
        with self.assertRaises(IdentifierEncodeError):
            generate_method_id(self.class_id, None)  # type: ignore[arg-type]

    def test_generate_field_id(self) -> None:
        class_id = "class:com.example.model:User"
        self.assertEqual(
            generate_field_id(class_id, "username", "String"),
            "field:com.example.model:User:username:String",
        )
        self.assertEqual(
            generate_field_id(class_id, "username", None),
            "field:com.example.model:User:username:Object",
        )
        with self.assertRaises(IdentifierEncodeError):
            generate_field_id("invalid", "field", "String")

    def test_generate_package_id(self) -> None:
        self.assertEqual(generate_package_id("com.example.service"), "package:com.example.service")
        self.assertEqual(generate_package_id("Com.Example"), "package:com.example")
        self.assertEqual(generate_package_id(""), "package:")
        self.assertEqual(generate_package_id(None), "package:")

    def test_generate_repository_id(self) -> None:
        repo_id = generate_repository_id("/path/to/repo", "myproject")
        self.assertTrue(repo_id.startswith("repo:myproject:"))
        self.assertTrue(validate(repo_id, NodeType.REPOSITORY).valid)

    def test_same_repository_name_different_paths(self) -> None:
        id1 = generate_repository_id("/path1/to/repo", "project")
        id2 = generate_repository_id("/path2/to/repo", "project")
        self.assertNotEqual(id1, id2)

    def test_generate_repository_id_requires_inputs(self) -> None:
        with self.assertRaises(IdentifierEncodeError):
            generate_repository_id("/path", None)  # type: ignore[arg-type]
        with self.assertRaises(IdentifierEncodeError):
            generate_repository_id(None, "project")  # type: ignore[arg-type]

    def test_generate_subproject_id(self) -> None:
        repo_id = "repo:myproject:12345678"
        self.assertEqual(
            generate_subproject_id(repo_id, "submodule/core"),
            "subproject:repo:myproject:12345678:submodule/core",
        )
        self.assertEqual(
            generate_subproject_id(repo_id, "\\submodule\\core\\"),
            "subproject:repo:myproject:12345678:submodule/core",
        )

    def test_generate_subproject_id_rejects_non_repository_parent(self) -> None:
        with self.assertRaises(IdentifierEncodeError):
            generate_subproject_id("class::Foo", "path")
        with self.assertRaises(IdentifierEncodeError):
            generate_subproject_id("repo:myproject:12345678", None)  # type: ignore[arg-type]

    def test_generate_annotation_id(self) -> None:
        self.assertEqual(
            generate_annotation_id("org.springframework.stereotype", "Service"),
            "annotation:org.springframework.stereotype.Service",
        )
        self.assertEqual(generate_annotation_id("", "Override"), "annotation:Override")
        self.assertEqual(generate_annotation_id(None, "Override"), "annotation:Override")
        with self.assertRaises(IdentifierEncodeError):
            generate_annotation_id("pkg", None)  # type: ignore[arg-type]

    def test_generate_upsert_audit_id_escapes_nested_node_id(self) -> None:
        audit_id = generate_upsert_audit_id("op123", "Class", "class:com.example:Test")
        self.assertEqual(audit_id, "upsert_audit:op123:Class:class%3Acom.example%3ATest")
        self.assertTrue(validate(audit_id, NodeType.UPSERT_AUDIT).valid)
        _, fields = decode(audit_id)
        self.assertEqual(unescape_field(fields[2]), "class:com.example:Test")

    def test_generate_upsert_audit_id_accepts_node_type_enum(self) -> None:
        audit_id = generate_upsert_audit_id("op1", NodeType.CLASS, "class::Foo")
        self.assertTrue(audit_id.startswith("upsert_audit:op1:CLASS:"))

    def test_generate_upsert_audit_id_requires_all_parts(self) -> None:
        for args in (("", "Class", "id"), ("op", None, "id"), ("op", "Class", "")):
            with self.subTest(args=args):
                with self.assertRaises(IdentifierEncodeError):
                    generate_upsert_audit_id(*args)

    def test_generate_operation_id(self) -> None:
        self.assertRegex(generate_operation_id(), r"^upsert_\d+_\d+$")


class TestConsistency(unittest.TestCase):
    def test_same_ids_are_consistent(self) -> None:
        self.assertTrue(is_consistent_id("class:com.example:A", "class:com.example:A"))
        self.assertTrue(is_consistent_id({"id": "package:a.b"}, SimpleNamespace(id="package:a.b")))

    def test_different_ids_are_inconsistent(self) -> None:
        self.assertFalse(is_consistent_id("class:com.example:A", "class:com.example:B"))

    def test_missing_nodes_are_inconsistent(self) -> None:
        self.assertFalse(is_consistent_id("class::A", None))
        self.assertFalse(is_consistent_id(None, "class::A"))
        self.assertFalse(is_consistent_id(None, None))
        self.assertFalse(is_consistent_id(object(), object()))


if __name__ == "__main__":
    unittest.main()
