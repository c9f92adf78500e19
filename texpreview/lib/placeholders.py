'''
Placeholder tables: ordered ledgers mapping opaque tokens to the content they stand in for.

Tokens look like '__BLK_0__' or '__MTH_3__'. They are made only of letters, digits and
underscores, so they pass unchanged through the converter's own regexes and through HTML
sanitization.
'''

import re
from typing import Dict, Iterator, Tuple


class PlaceholderTable:
    def __init__(self, namespace: str):
        self._namespace = namespace
        self._entries: Dict[str, str] = {}
        self.token_re = re.compile(rf'__{re.escape(namespace)}_[0-9]+__')

    @property
    def namespace(self) -> str:
        return self._namespace

    def store(self, content: str) -> str:
        '''Records content under a freshly-minted token, and returns the token.'''
        token = f'__{self._namespace}_{len(self._entries)}__'
        self._entries[token] = content
        return token

    def is_token(self, text: str) -> bool:
        return self.token_re.fullmatch(text) is not None

    def resolve(self, text: str) -> str:
        '''
        Replaces each token in the text with its stored content. Since stored content may itself
        contain tokens of the same table (e.g., a list nested inside a list), replacement repeats
        until no known tokens remain. Unknown tokens are left untouched.

        Entries whose token never appears are appended at the end rather than lost.
        '''
        consumed = set()

        def replace(match):
            token = match.group(0)
            if token in self._entries and token not in consumed:
                consumed.add(token)
                return self._entries[token]
            return token

        while True:
            new_text = self.token_re.sub(replace, text)
            if new_text == text:
                orphans = [token for token in self._entries if token not in consumed]
                if not orphans:
                    return text
                new_text += ''.join(orphans)
            text = new_text

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._entries.items())
