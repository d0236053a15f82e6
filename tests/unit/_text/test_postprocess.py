# tests/unit/_text/test_postprocess.py
from __future__ import annotations

import itertools

import pytest
from pytest_mock import MockerFixture

from chat_translator._text.postprocess import SOFTENING_REPLACEMENTS, postprocess


@pytest.mark.parametrize(
    "input_text, expected_output",
    [
        ("これは何でしょうか？", "これは何かな？"),
        ("すごいですね！", "すごいだね！"),
        ("ありがとうございます", "ありがとう"),
        ("もう一度してください", "もう一度して"),
        ("  普通の文  ", "普通の文"),
        ("「引用された訳」", "引用された訳"),
        ('"quoted"', "quoted"),
        ("変化なし", "変化なし"),
    ],
)
def test_postprocess(input_text, expected_output):
    assert postprocess(input_text) == expected_output


@pytest.mark.parametrize(
    "text",
    ["「A」と「B」", '"yes" or "no"', "「外「内」外」"],
)
def test_separate_quoted_parts_are_not_unwrapped(text):
    """首尾引号不是同一对时，译文保持原样。"""
    assert postprocess(text) == text


def test_replacement_order_does_not_matter(mocker: MockerFixture):
    text = "ありがとうございます、これでしょうか？すごいですね！してください"
    expected = postprocess(text)
    for order in itertools.permutations(SOFTENING_REPLACEMENTS):
        mocker.patch(
            "chat_translator._text.postprocess.SOFTENING_REPLACEMENTS", order
        )
        assert postprocess(text) == expected
