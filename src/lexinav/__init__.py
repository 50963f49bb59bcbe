"""lexinav - browse a typed lexicon by typing, cycling and descending."""
