from mstyle_scanner import TokenizerState, TokenKind, tokenize_line


def _tokens(text):
    return tokenize_line(text, 1, TokenizerState()).tokens


def test_assignment_tokens():
    tokens = _tokens("total = count + 1;")
    assert [t.kind for t in tokens] == [
        TokenKind.IDENTIFIER,
        TokenKind.OPERATOR,
        TokenKind.IDENTIFIER,
        TokenKind.OPERATOR,
        TokenKind.NUMBER,
        TokenKind.SEMICOLON,
    ]
    assert [(t.start, t.end) for t in tokens][:2] == [(0, 5), (6, 7)]


def test_transpose_versus_string():
    tokens = _tokens("y = x';")
    assert tokens[3].kind == TokenKind.OPERATOR
    assert tokens[3].text == "'"

    tokens = _tokens("s = 'it''s';")
    assert tokens[2].kind == TokenKind.STRING
    assert tokens[2].text == "'it''s'"


def test_percent_inside_string_is_not_a_comment():
    result = tokenize_line('disp("100%")', 1, TokenizerState())
    assert result.comment is None
    assert result.tokens[2].text == '"100%"'


def test_trailing_comment_is_split_off():
    result = tokenize_line("x = 1; % note", 1, TokenizerState())
    assert result.code == "x = 1;"
    assert result.comment == "% note"
    assert result.tokens[-1].kind == TokenKind.SEMICOLON


def test_elementwise_operators_and_numbers():
    texts = [t.text for t in _tokens("z = a.^2 + 1e-3 ./ 0.5;")]
    assert ".^" in texts
    assert "1e-3" in texts
    assert "./" in texts
    assert "0.5" in texts


def test_keywords_and_depth():
    tokens = _tokens("if x(end) > 0")
    assert tokens[0].kind == TokenKind.KEYWORD
    end = tokens[3]
    assert end.kind == TokenKind.KEYWORD
    assert end.depth == 1
    assert end.enclosure == "("
    assert tokens[2].depth == 0
    assert tokens[4].depth == 0


def test_contextual_keywords_are_identifiers():
    tokens = _tokens("methods (Static)")
    assert tokens[0].kind == TokenKind.IDENTIFIER


def test_continuation_marker():
    result = tokenize_line("total = first + ... add second", 1, TokenizerState())
    assert result.continues is True
    assert result.comment == "... add second"
    assert [t.text for t in result.tokens] == ["total", "=", "first", "+"]


def test_bracket_state_carries_across_lines():
    state = TokenizerState()
    first = tokenize_line("m = [1 2", 1, state)
    assert first.continues is True
    assert state.depth == 1

    second = tokenize_line("     3 4];", 2, state)
    assert second.continues is False
    assert state.depth == 0
    assert second.tokens[0].depth == 1
    assert second.tokens[0].enclosure == "["
