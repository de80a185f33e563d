from groupbot.nsfw import Picture, auto_judge, judge


def test_judge_neutral():
    assert judge(Picture(neutral=0.9)) == "普通哦"


def test_judge_drawing_with_flags():
    picture = Picture(drawings=0.6, hentai=0.5, porn=0.4, sexy=0.31)
    assert judge(picture) == "二次元 hentai porn hso"


def test_judge_low_neutral_counts_as_drawing():
    assert judge(Picture(drawings=0.0, neutral=0.1, sexy=0.5)) == "二次元 hso"


def test_judge_exact_threshold_is_real():
    assert judge(Picture(drawings=0.1, neutral=0.3, porn=0.9)) == "三次元 porn"


def test_auto_judge_neutral_is_silent():
    assert auto_judge(Picture(neutral=0.5, porn=0.9)) is None


def test_auto_judge_unflagged_is_silent():
    assert auto_judge(Picture(drawings=0.9)) is None


def test_auto_judge_real_photo():
    assert auto_judge(Picture(drawings=0.1, porn=0.8)) == "三次元 porn"


def test_auto_judge_drawing():
    assert auto_judge(Picture(drawings=0.8, hentai=0.7)) == "二次元 hentai"