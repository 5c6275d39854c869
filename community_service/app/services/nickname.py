from __future__ import annotations

import random


ADJECTIVES = (
    "용감한",
    "성실한",
    "배고픈",
    "졸린",
    "행복한",
    "꼼꼼한",
    "엉뚱한",
    "부지런한",
    "수줍은",
    "씩씩한",
)

NOUNS = (
    "호랑이",
    "고양이",
    "다람쥐",
    "펭귄",
    "개발자",
    "부엉이",
    "거북이",
    "코알라",
    "돌고래",
    "판다",
)


class NicknameGenerator:
    """형용사 + 명사 + 숫자 조합의 랜덤 닉네임 생성기.

    유일성은 보장하지 않는다. 충돌은 users.nickname 유니크 인덱스로 감지하고 호출 측에서 재시도한다.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def generate(self) -> str:
        adjective = self._rng.choice(ADJECTIVES)
        noun = self._rng.choice(NOUNS)
        number = self._rng.randint(0, 9999)
        return f"{adjective}{noun}{number:04d}"


def get_nickname_generator() -> NicknameGenerator:
    return NicknameGenerator()
