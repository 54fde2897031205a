#  Copyright 2016-2022. Couchbase, Inc.
#  All Rights Reserved.
#
#  Licensed under the Apache License, Version 2.0 (the "License")
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from typing import (Any,
                    Dict,
                    List)

from cbbucket.exceptions import InvalidArgumentException
from cbbucket.result import MutationToken


class MutationState:
    """Causal consistency token set used w/ the ``consistent_with`` query option.

    Args:
        tokens (:class:`~cbbucket.result.MutationToken`): Tokens of mutations the query
            should be consistent with.
    """

    def __init__(self, *tokens  # type: MutationToken
                 ):
        self._sv = set()
        for token in tokens:
            self.add_mutation_token(token)

    def add_mutation_token(self, mut_token  # type: MutationToken
                           ) -> None:
        if not isinstance(mut_token, MutationToken):
            raise InvalidArgumentException(message='Expected a MutationToken.')
        self._sv.add(mut_token)

    def add_results(self, *rvs,  # type: List[Any]
                    **kwargs  # type: Dict[str, Any]
                    ) -> bool:
        """
        Changes the state to reflect the mutations which yielded the given
        results.

        :param rvs: One or more results exposing a ``mutation_token()`` method
        :param quiet: Suppress errors if one of the results does not
            contain a convertible state.
        :return: `True` if the results were valid and added, `False` if not
            added (and `quiet` was specified)
        """
        if not rvs:
            raise InvalidArgumentException(message='No results passed')
        for rv in rvs:
            mut_token = rv.mutation_token() if hasattr(rv, 'mutation_token') else None
            if not isinstance(mut_token, MutationToken):
                if kwargs.get('quiet', False) is True:
                    return False
                raise InvalidArgumentException(message='Result does not contain token')
            self._sv.add(mut_token)
        return True

    def as_list(self) -> List[Dict[str, Any]]:
        return [mt.as_dict() for mt in self._sv]

    def __len__(self):
        return len(self._sv)

    def __repr__(self):
        return "MutationState:{}".format(self._sv)
