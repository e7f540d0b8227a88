"""
검증 이벤트
============

검증이 수락되면 다음 레코드가 발행된다.

    {subject, identity, range_min, range_max, accepted, timestamp}

관찰자(observer)는 이벤트 하나를 인자로 받는 호출 가능 객체이다.
(인덱서, 감사 로그 등 외부 협력자)
"""

import logging
from collections import namedtuple


logger = logging.getLogger(__name__)


class VerificationEvent(namedtuple(
    "VerificationEvent",
    ["subject", "identity", "range_min", "range_max", "accepted", "timestamp"],
)):
    __slots__ = ()

    def to_dict(self):
        return dict(self._asdict())


def emit(observers, event):
    """이벤트를 모든 관찰자에게 순서대로 전달한다.

    원장은 이미 기록된 상태이므로 관찰자 예외는 로그로 남기고
    다음 관찰자로 넘어간다.
    """
    for observer in observers:
        try:
            observer(event)
        except Exception:
            logger.exception("관찰자 %r 실패 (identity=%s)", observer, event.identity)
