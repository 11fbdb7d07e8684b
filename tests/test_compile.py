"""
Сквозные тесты компиляции шаблонов: подстановка, условные блоки, ошибки.
"""

import threading

import pytest

from sqltpl import (
    ArgumentTypeError,
    ArgumentValueError,
    CompileOptions,
    QueryBuilder,
    SkipPolicy,
    SqlTplError,
    TemplateSyntaxError,
    ValidationError,
    compile,
    skip,
)


class TestSubstitution:

    def test_update_statement(self):
        assert compile("UPDATE t SET a = ? WHERE id = ?d", ["x", 10]) == "UPDATE t SET a = 'x' WHERE id = 10"

    def test_identifier_list(self):
        assert compile("?#", [["a", "b"]]) == "`a`, `b`"

    def test_array_list(self):
        assert compile("?a", [[1, 2, 3]]) == "1, 2, 3"

    def test_array_assoc(self):
        assert compile("?a", [{"a": 1, "b": 2}]) == "`a` = 1, `b` = 2"

    def test_template_without_placeholders(self):
        assert compile("SELECT name FROM users WHERE user_id = 1") == "SELECT name FROM users WHERE user_id = 1"

    def test_generic_string(self):
        assert compile("SELECT * FROM users WHERE name = ? AND block = 0", ["Jack"]) == \
            "SELECT * FROM users WHERE name = 'Jack' AND block = 0"

    def test_mixed_placeholders(self):
        result = compile(
            "SELECT ?# FROM users WHERE user_id = ?d AND block = ?d",
            [["name", "email"], 2, True],
        )
        assert result == "SELECT `name`, `email` FROM users WHERE user_id = 2 AND block = 1"

    def test_assoc_update(self):
        result = compile("UPDATE users SET ?a WHERE user_id = -1", [{"name": "Jack", "email": None}])
        assert result == "UPDATE users SET `name` = 'Jack', `email` = NULL WHERE user_id = -1"

    def test_glued_placeholders(self):
        assert compile("WHERE (a, b) IN ((?d,?d))", [1, 2]) == "WHERE (a, b) IN ((1,2))"

    def test_whitespace_is_normalized(self):
        assert compile("  SELECT\n\t?d  \n", [1]) == "SELECT 1"

    @pytest.mark.parametrize("template", ["?d", "?f", "?"])
    def test_null_propagation(self, template):
        assert compile(template, [None]) == "NULL"

    def test_purity(self):
        template = "SELECT * FROM t WHERE a = ? {AND b IN (?a)}"
        args = ["x", [1, 2]]
        assert compile(template, args) == compile(template, args)
        assert args == ["x", [1, 2]]


class TestConditionalBlocks:

    def test_skip_drops_block(self):
        assert compile("SELECT * FROM t {WHERE id = ?d}", [skip()]) == "SELECT * FROM t"

    def test_value_keeps_block(self):
        assert compile("SELECT * FROM t {WHERE id = ?d}", [5]) == "SELECT * FROM t WHERE id = 5"

    @pytest.mark.parametrize("block, expected", [
        (skip(), "SELECT name FROM users WHERE `user_id` IN (1, 2, 3)"),
        (True, "SELECT name FROM users WHERE `user_id` IN (1, 2, 3) AND block = 1"),
    ])
    def test_block_glued_to_parenthesis(self, block, expected):
        template = "SELECT name FROM users WHERE ?# IN (?a){ AND block = ?d}"
        assert compile(template, ["user_id", [1, 2, 3], block]) == expected

    def test_arguments_stay_aligned_after_skip(self):
        result = compile("SELECT {a = ?d AND b = ?d} c = ?d", [skip(), 2, 3])
        assert result.split() == ["SELECT", "c", "=", "3"]

    def test_skip_in_second_placeholder_of_block(self):
        result = compile("SELECT 1 {AND a = ?d AND b = ?d} AND c = ?d", [1, skip(), 3])
        assert result.split() == ["SELECT", "1", "AND", "c", "=", "3"]

    def test_several_blocks(self):
        template = "SELECT * FROM t WHERE 1 {AND a = ? } {AND b = ?d}"
        assert compile(template, ["x", skip()]) == "SELECT * FROM t WHERE 1 AND a = 'x'"
        assert compile(template, [skip(), 2]).split() == "SELECT * FROM t WHERE 1 AND b = 2".split()

    def test_block_without_placeholders_is_kept(self):
        assert compile("SELECT 1 {FOR UPDATE}") == "SELECT 1 FOR UPDATE"

    def test_unterminated_block_closes_at_end(self):
        assert compile("SELECT 1 {AND x = ?d", [5]) == "SELECT 1 AND x = 5"
        assert compile("SELECT 1 {AND x = ?d", [skip()]) == "SELECT 1"

    def test_nested_block_rejected(self):
        with pytest.raises(TemplateSyntaxError, match="Nested") as exc:
            compile("SELECT 1 {AND a {AND b}}")
        assert exc.value.position == 16

    def test_unmatched_close_rejected(self):
        with pytest.raises(TemplateSyntaxError, match="Unmatched"):
            compile("SELECT 1 }")

    def test_syntax_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            compile("{ { } }")

    def test_bad_argument_in_suppressed_block_still_fails(self):
        with pytest.raises(ArgumentTypeError) as exc:
            compile("SELECT 1 {AND a = ?d AND b = ? }", [skip(), [1]])
        assert exc.value.index == 1


class TestSkipOutsideBlock:

    def test_error_by_default(self):
        with pytest.raises(ArgumentTypeError, match="outside of a conditional block"):
            compile("SELECT * FROM t WHERE id = ?d", [skip()])

    def test_omit_policy(self, omit_builder):
        assert omit_builder.build_query("SELECT ?d", [skip()]) == "SELECT"

    def test_omit_policy_via_compile(self):
        options = CompileOptions(skip_outside_block=SkipPolicy.OMIT)
        assert compile("SELECT a, ?d", [skip()], options) == "SELECT a,"


class TestErrors:

    def test_count_mismatch(self):
        with pytest.raises(ValidationError):
            compile("SELECT ?d, ?d", [1])
        with pytest.raises(ValidationError):
            compile("SELECT 1", [1])

    def test_list_for_generic_rejected(self):
        with pytest.raises(ArgumentTypeError):
            compile("?", [[1, 2]])

    def test_error_carries_argument_index(self):
        with pytest.raises(ArgumentTypeError) as exc:
            compile("SELECT ?d, ?", [1, {"a": 1}])
        assert exc.value.index == 1
        assert str(exc.value).startswith("argument #1:")

    def test_strict_numeric(self, strict_builder):
        with pytest.raises(ArgumentValueError):
            strict_builder.build_query("?d", ["abc"])
        assert strict_builder.build_query("?d", ["15"]) == "15"

    @pytest.mark.parametrize("template, value", [("?f", 10 ** 400), ("?", 10 ** 5000)], ids=["float-10e400", "any-10e5000"])
    def test_huge_numbers_raise_library_errors(self, template, value):
        with pytest.raises(SqlTplError):
            compile(template, [value])

    def test_overlong_integer_string(self, strict_builder):
        assert compile("?d", ["9" * 5000]) == "9223372036854775807"
        with pytest.raises(SqlTplError):
            strict_builder.build_query("?d", ["9" * 5000])

    def test_errors_are_builtin_compatible(self):
        with pytest.raises(TypeError):
            compile("?a", [5])
        with pytest.raises(ValueError):
            compile("?d ?d", [5])


class TestQueryBuilder:

    def test_skip_method(self, builder):
        assert builder.skip() is skip()

    def test_escaper(self):
        builder = QueryBuilder(escaper=lambda s: s.replace("'", "''"))
        assert builder.build_query("name = ?", ["O'Brien"]) == "name = 'O''Brien'"
        assert builder.build_query("?a", [{"n": "it's"}]) == "`n` = 'it''s'"

    def test_report(self, builder):
        report = builder.compile_with_report(
            "SELECT * FROM t WHERE 1 {AND a = ?d} {AND b = ? }", [skip(), "x"]
        )
        assert report.sql.split() == "SELECT * FROM t WHERE 1 AND b = 'x'".split()
        assert report.placeholders == 2
        assert report.arguments == 2
        assert report.blocks_emitted == 1
        assert report.blocks_suppressed == 1
        assert report.options["numeric_coercion"] == "loose"

    def test_tokens_report(self, builder):
        report = builder.tokens_report("id = ?d")
        assert [t.type for t in report.tokens] == ["LITERAL", "LITERAL", "LITERAL", "LITERAL", "PLACEHOLDER", "LITERAL"]
        assert report.tokens[4].kind == "?d"

    def test_shared_between_threads(self, builder):
        results = []

        def worker(n):
            results.append(builder.build_query("SELECT ?d {AND x = ? }", [n, skip() if n % 2 else "y"]))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == sorted(
            "SELECT %d AND x = 'y'" % i if i % 2 == 0 else "SELECT %d" % i for i in range(8)
        )
