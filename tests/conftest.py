import pytest

from models.base_models.bidirectional_markov_chain import BidirectionalMarkovChain


SENTENCE_1 = "What noise annoys a noisy oyster?"
SENTENCE_2 = "A noisy noise annoys a noisy oyster."


@pytest.fixture
def oyster_sentences():
    """The two whitespace-tokenized fixture sentences."""
    return [SENTENCE_1.split(), SENTENCE_2.split()]


@pytest.fixture
def oyster_chain(oyster_sentences):
    """A prefix length 1 chain built from both fixture sentences."""
    chain = BidirectionalMarkovChain(1)
    for tokens in oyster_sentences:
        chain.build(tokens)
    return chain
