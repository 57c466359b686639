from dreamjournal.models.dream_item import DreamItem
from dreamjournal.widgets.waterfall_estimator import EstimatorConfig, estimate_item_height


def test_image_makes_card_taller():
    plain = DreamItem(id=1, content="x" * 120)
    illustrated = DreamItem(id=2, content="x" * 120, image="dream.png")

    assert estimate_item_height(illustrated, 180) > estimate_item_height(plain, 180)


def test_longer_content_never_estimates_shorter():
    previous = 0
    for length in range(0, 1200, 37):
        height = estimate_item_height({"content": "y" * length}, 180)
        assert height >= previous
        previous = height


def test_estimate_never_below_floor():
    assert estimate_item_height({}, 180) == 150
    assert estimate_item_height(None, 180) == 150


def test_default_constants():
    dream = {"content": "z" * 120, "image": "a.png", "tags": ["flying"]}

    # 120 base + 200 image + 2 lines * 20 + 30 tag row
    assert estimate_item_height(dream, 180) == 390


def test_max_lines_caps_text_block():
    config = EstimatorConfig(max_lines=3, min_height=0)

    assert estimate_item_height({"content": "a" * 5000}, 180, config) == 120 + 3 * 20


def test_chars_per_line_can_follow_column_width():
    config = EstimatorConfig(average_char_width=10, min_height=0)
    dream = {"content": "b" * 200}

    narrow = estimate_item_height(dream, 100, config)
    wide = estimate_item_height(dream, 400, config)

    assert narrow == 120 + 20 * 20
    assert wide == 120 + 5 * 20


def test_empty_tag_list_adds_no_tag_row():
    config = EstimatorConfig(min_height=0)

    assert estimate_item_height({"tags": []}, 180, config) == 120
    assert estimate_item_height({"tags": ["water"]}, 180, config) == 150


def test_config_built_from_settings():
    from dreamjournal.utils.settings import settings
    from dreamjournal.widgets.waterfall_estimator import get_estimator_config

    settings.setValue("estimate_image_height", 240)
    settings.setValue("estimate_chars_per_line", 0)

    config = get_estimator_config()

    assert config.image_height == 240
    assert config.chars_per_line == 1
    assert config.min_height == 150
