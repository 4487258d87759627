# python
r"""
Tokens module behavioral tests.

Scope
- Validate classification: "--", long options with and without "=value",
  short options and bundles, and everything that falls back to POSITIONAL.
- Validate inline value unquoting (quotes stripped, escapes decoded in "...").
- Validate the replayable cursor (peek/next/reset/seek and exhaustion).

Conventions
- Test method names follow CamelCase per project convention.
- Expected streams are compared as (kind, value) pairs unless raw matters.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argot import NoMoreTokensError, Token, TokenKind, Tokenizer, tokenize


def kinds(args):
    return [(token.kind, token.value) for token in tokenize(args)]


class TestTokenize(TestCase):

    def testBundledShortFlags(self):
        tokens = tokenize(["-abc"])
        self.assertEqual([token.value for token in tokens], ["-a", "-b", "-c"])
        self.assertTrue(all(token.kind is TokenKind.SHORT_OPTION for token in tokens))
        self.assertTrue(all(token.raw == "-abc" for token in tokens))

    def testSingleShortFlag(self):
        self.assertEqual(kinds(["-v"]), [(TokenKind.SHORT_OPTION, "-v")])

    def testEndOfOptions(self):
        self.assertEqual(kinds(["-v", "--", "--looks-like-option"]), [
            (TokenKind.SHORT_OPTION, "-v"),
            (TokenKind.END_OPTIONS, "--"),
            (TokenKind.POSITIONAL, "--looks-like-option"),
        ])

    def testEndOfOptionsIsSticky(self):
        self.assertEqual(kinds(["--", "-x", "--"]), [
            (TokenKind.END_OPTIONS, "--"),
            (TokenKind.POSITIONAL, "-x"),
            (TokenKind.POSITIONAL, "--"),
        ])

    def testLongOption(self):
        self.assertEqual(kinds(["--verbose"]), [(TokenKind.LONG_OPTION, "--verbose")])

    def testLongOptionWithInlineValue(self):
        tokens = tokenize(["--name=value"])
        self.assertEqual([(token.kind, token.value) for token in tokens], [
            (TokenKind.LONG_OPTION, "--name"),
            (TokenKind.OPTION_VALUE, "value"),
        ])
        self.assertEqual({token.raw for token in tokens}, {"--name=value"})

    def testInlineValueSplitsAtFirstEquals(self):
        self.assertEqual(kinds(["--define=a=b"])[1], (TokenKind.OPTION_VALUE, "a=b"))

    def testEmptyInlineValue(self):
        self.assertEqual(kinds(["--name="])[1], (TokenKind.OPTION_VALUE, ""))

    def testDoubleQuotedValueDecodesEscapes(self):
        self.assertEqual(kinds(['--msg="a\\nb\\t\\"c\\""'])[1][1], 'a\nb\t"c"')

    def testUnknownEscapeKeepsBackslash(self):
        self.assertEqual(kinds(['--path="C:\\qx"'])[1][1], "C:\\qx")

    def testSingleQuotedValueIsLiteral(self):
        self.assertEqual(kinds(["--msg='a\\nb'"])[1][1], "a\\nb")

    def testMismatchedQuotesKept(self):
        self.assertEqual(kinds(["--msg=\"abc'"])[1][1], "\"abc'")

    def testPositionalFallbacks(self):
        self.assertEqual(kinds(["file.txt", "-", ""]), [
            (TokenKind.POSITIONAL, "file.txt"),
            (TokenKind.POSITIONAL, "-"),
            (TokenKind.POSITIONAL, ""),
        ])

    def testOriginTracksSourceArgument(self):
        self.assertEqual([token.origin for token in tokenize(["x", "-ab", "--k=v"])], [0, 1, 1, 2, 2])

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            tokenize(["ok", 3])

    def testValuedTokens(self):
        self.assertTrue(Token(TokenKind.POSITIONAL, "x", "x").valued)
        self.assertTrue(Token(TokenKind.OPTION_VALUE, "x", "--k=x").valued)
        self.assertFalse(Token(TokenKind.LONG_OPTION, "--k", "--k").valued)
        self.assertTrue(Token(TokenKind.SHORT_OPTION, "-k", "-k").option)


class TestTokenizer(TestCase):

    def testCursor(self):
        tokenizer = Tokenizer(["a", "b"])
        self.assertEqual(tokenizer.size(), 2)
        self.assertEqual(tokenizer.position(), 0)
        self.assertEqual(tokenizer.peek().value, "a")
        self.assertEqual(tokenizer.position(), 0)
        self.assertEqual(tokenizer.next().value, "a")
        self.assertEqual(tokenizer.next().value, "b")
        self.assertFalse(tokenizer.has_next())

    def testExhaustion(self):
        tokenizer = Tokenizer(["a"])
        tokenizer.next()
        with self.assertRaises(NoMoreTokensError):
            tokenizer.next()
        with self.assertRaises(NoMoreTokensError):
            tokenizer.peek()

    def testResetReplays(self):
        tokenizer = Tokenizer(["a", "b"])
        tokenizer.next()
        tokenizer.reset()
        self.assertEqual(tokenizer.next().value, "a")

    def testSeekIsClamped(self):
        tokenizer = Tokenizer(["a", "b", "c"])
        tokenizer.seek(10)
        self.assertEqual(tokenizer.position(), 3)
        tokenizer.seek(-4)
        self.assertEqual(tokenizer.position(), 0)
        tokenizer.seek(2)
        self.assertEqual(tokenizer.next().value, "c")
        with self.assertRaises(TypeError):
            tokenizer.seek("1")

    def testRetokenizeRewinds(self):
        tokenizer = Tokenizer(["a"])
        tokenizer.next()
        self.assertIs(tokenizer.tokenize(["-xy"]), tokenizer)
        self.assertEqual(tokenizer.position(), 0)
        self.assertEqual(len(tokenizer), 2)
        self.assertEqual([token.value for token in tokenizer], ["-x", "-y"])

    def testEmpty(self):
        tokenizer = Tokenizer()
        self.assertEqual(tokenizer.size(), 0)
        self.assertFalse(tokenizer.has_next())

    def testTokenizationIsLogged(self):
        with self.assertLogs("argot.tokens", level="DEBUG") as logs:
            Tokenizer(["-v"])
        self.assertTrue(any("tokenized 1 token(s)" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
