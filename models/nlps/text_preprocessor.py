"""
Text Preprocessor Module

Turns raw corpus text into the token sequences fed to
`BidirectionalMarkovChain.build`, and turns generated tokens back into text.

### Features:
1. **Cleaning** (all optional, applied by `preprocess`):
    - Lowercasing
    - Removing URLs
    - Removing HTML tags
    - Collapsing whitespace
2. **Tokenization**:
    - Whitespace splitting. Punctuation stays attached to its word, so
      "oyster?" and "oyster." are different tokens.
3. **Assembly**:
    - `detokenize` joins generated tokens with single spaces.

### Dependencies:
- `re`: For URL removal.
- `bs4 (BeautifulSoup)`: For removing HTML tags.

### Example Usage:

```python
preprocessor = TextPreprocessor()
tokens = preprocessor.tokenize(preprocessor.preprocess("<p>What noise annoys a noisy oyster?</p>", strip_html=True))
# ['What', 'noise', 'annoys', 'a', 'noisy', 'oyster?']
print(preprocessor.detokenize(tokens))
```
"""

import re

from bs4 import BeautifulSoup


class TextPreprocessor:

    def to_lowercase(self, text):
        """Converts text to lowercase."""
        return text.lower()

    def tokenize(self, text):
        """Splits text into tokens on runs of whitespace."""
        return text.split()

    def handle_whitespace(self, text):
        """Removes extra whitespace from text."""
        return " ".join(text.split())

    def handle_urls(self, text):
        """Removes URLs from text."""
        return re.sub(r"http\S+|www\S+|https\S+", "", text, flags=re.MULTILINE)

    def remove_html_tags(self, text):
        """Removes HTML tags from text."""
        return BeautifulSoup(text, "html.parser").get_text()

    def handle_missing_data(self, text):
        """Handles missing data by replacing None or NaN with an empty string."""
        if text is None or text != text:
            return ""
        return str(text)

    def preprocess(self, text, lowercase=False, strip_urls=False, strip_html=False):
        """
        Applies the configured cleaning steps to a raw document.

        Args:
            text (str): Raw document text. None and NaN count as empty.
            lowercase (bool): Convert to lowercase.
            strip_urls (bool): Remove http(s) and www links.
            strip_html (bool): Remove HTML markup, keeping the text content.

        Returns:
            str: The cleaned text with whitespace collapsed.
        """
        text = self.handle_missing_data(text)
        if strip_html:
            text = self.remove_html_tags(text)
        if strip_urls:
            text = self.handle_urls(text)
        if lowercase:
            text = self.to_lowercase(text)
        return self.handle_whitespace(text)

    def detokenize(self, tokens):
        """
        Joins generated tokens back into text.

        Args:
            tokens (iterable of str): Tokens in reading order. Empty strings
                (chain placeholders or end markers) are skipped.

        Returns:
            str: The space-joined text.
        """
        return " ".join(token for token in tokens if token)
