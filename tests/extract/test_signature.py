"""Tests for the signature assembler and signature models."""

from __future__ import annotations

import pytest

from bundlescope.core.errors import ErrorCode, ExtractionError, ParseError
from bundlescope.extract.flatten import fn_names_split
from bundlescope.extract.models import (
    ExtractOptions,
    ExtractorVersion,
    FunctionSignature,
    Signature,
)
from bundlescope.extract.parser import JavaScriptParser
from bundlescope.extract.signature import extract_signature, extract_structure


class TestExtractSignature:
    """extract_signature() / extract_structure()."""

    def test_given_source_when_extracted_then_both_parts_present(self) -> None:
        """Function and literal signatures come together."""
        # Given
        source = "function greet(name){ return 'hello ' + name; }"

        # When
        signature = extract_structure(source)

        # Then
        assert [fn.name for fn in signature.function_signature] == ["greet"]
        assert signature.literal_signature == ["hello "]

    def test_given_non_node_when_extracted_then_raises(self) -> None:
        """Inputs that are not syntax nodes are rejected."""
        with pytest.raises(ExtractionError) as exc_info:
            extract_signature("var a = 1;")

        assert exc_info.value.code == ErrorCode.EXTRACT_UNSUPPORTED_INPUT

    def test_given_broken_source_when_strict_then_parse_error(self) -> None:
        """The default parser is strict."""
        with pytest.raises(ParseError):
            extract_structure("function (")

    def test_given_broken_source_when_lenient_then_extracted(self) -> None:
        """A lenient parser lets extraction run on the recovered tree."""
        signature = extract_structure(
            "function ok(){ f('x'); }\nvar = ;",
            parser=JavaScriptParser(strict=False),
        )

        assert "x" in signature.literal_signature

    def test_given_deeply_nested_functions_when_extracted_then_all_found(self) -> None:
        """Function nesting deeper than the recursion limit is extracted."""
        # Given
        source = "var v = " + "function(){ return " * 400 + "0" + "; }" * 400 + ";"

        # When
        signature = extract_structure(source)

        # Then
        names = [fn.name for fn in signature.function_signature]
        assert len(names) == 400
        assert max(len(fn_names_split(name)) for name in names) == 400

    def test_given_versions_when_extracted_then_params_differ(self) -> None:
        """Options select the tokenizer mode."""
        source = "function a(b){ b(); }"

        v1 = extract_structure(source, ExtractOptions(version=ExtractorVersion.V1))
        v2 = extract_structure(source, ExtractOptions(version=ExtractorVersion.V2))

        assert len(v1.function_signature[0].fn_statement_tokens) == 2
        assert len(v2.function_signature[0].fn_statement_tokens) == 1


class TestSignatureSerialization:
    """to_dict()/from_dict() shapes."""

    def test_given_signature_when_serialized_then_camel_case_keys(self) -> None:
        """The JSON shape uses camelCase keys."""
        # Given
        signature = extract_structure("function a(){ f('lit', 42); }")

        # When
        data = signature.to_dict()

        # Then
        assert data == {
            "functionSignature": [
                {
                    "type": "fn",
                    "name": "a",
                    "index": 0,
                    "fnStatementTypes": ["t_Statement:expression_statement"],
                    "fnStatementTokens": [
                        "Expression:Call[Expression:Identifier[f](Literal:String, Literal:Numeric)]"
                    ],
                }
            ],
            "literalSignature": [42, "lit"],
        }

    def test_given_dict_when_loaded_then_equal_signature(self) -> None:
        """from_dict reads what to_dict writes."""
        signature = Signature(
            function_signature=[
                FunctionSignature(name="a", fn_statement_tokens=["x"], fn_statement_types=["t"], index=0)
            ],
            literal_signature=["s", 9],
        )

        assert Signature.from_dict(signature.to_dict()) == signature

    def test_given_partial_dict_when_loaded_then_defaults_filled(self) -> None:
        """Missing optional keys get defaults."""
        fn = FunctionSignature.from_dict({"name": "a"})

        assert fn.index == -1
        assert fn.type == "fn"
        assert fn.fn_statement_tokens == []
