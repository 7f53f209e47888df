"""Tests for the stage pipeline."""

import logging

import pytest

from formula import FormulaPipeline, FormulaUnknownCharacterError, tokenize, parse, interpret
from formula import FormulaNumber


class TestFormulaPipeline:
    """Test composing and running stages."""

    def test_empty_pipeline_returns_input(self):
        """Test that a pipeline with no stages is the identity."""
        pipeline = FormulaPipeline()
        assert len(pipeline) == 0
        assert pipeline.run("unchanged") == "unchanged"

    def test_stages_run_in_order(self):
        """Test that each stage receives the previous stage's output."""
        pipeline = FormulaPipeline(lambda x: x + 1, lambda x: x * 10)
        assert pipeline.run(1) == 20

    def test_append_returns_new_pipeline(self):
        """Test that pipelines are never changed in place."""
        first = FormulaPipeline(str.strip)
        second = first.append(str.upper)

        assert len(first) == 1
        assert len(second) == 2
        assert second.stages == (str.strip, str.upper)
        assert first.run("  abc ") == "abc"
        assert second.run("  abc ") == "ABC"

    def test_failing_stage_stops_the_run(self):
        """Test that a raised error propagates and later stages do not run."""
        called = []

        def fail(_value):
            raise ValueError("bad input")

        pipeline = FormulaPipeline(fail, called.append)
        with pytest.raises(ValueError, match="bad input"):
            pipeline.run(1)

        assert not called

    def test_formula_stages(self):
        """Test the language stages composed by hand."""
        pipeline = FormulaPipeline(tokenize, parse, interpret)
        assert pipeline.run("2 ^ 10") == FormulaNumber(1024.0)

    def test_formula_stage_error_propagates(self):
        """Test that a lex error comes out of the pipeline unchanged."""
        pipeline = FormulaPipeline(tokenize, parse, interpret)
        with pytest.raises(FormulaUnknownCharacterError):
            pipeline.run("1 = 1")

    def test_stages_are_logged(self, caplog):
        """Test that each stage is reported at debug level."""
        pipeline = FormulaPipeline(tokenize, parse)
        with caplog.at_level(logging.DEBUG, logger="FormulaPipeline"):
            pipeline.run("1")

        messages = [record.getMessage() for record in caplog.records if record.name == "FormulaPipeline"]
        assert messages == ["running stage 0: tokenize", "running stage 1: parse"]
