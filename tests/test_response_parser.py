from types import SimpleNamespace

from company_scout.models import SCORE_SUBJECTS, CompanyInfo, RadarScore, Source, default_scores
from company_scout.response_parser import (
    BUCKET_DEFAULTS,
    EMPTY_REPLY_TEXT,
    assemble_sources,
    bucket_lines,
    bullet_lines,
    classify_line,
    extract_block,
    is_confirmed_fortune500,
    normalize_response,
    parse_explanations,
    parse_scores,
    strip_markdown,
)

SAMPLE_REPLY = """## 华为情报
● [世界500强]: 华为是世界500强企业，排名第103位
● [薪酬福利]: 五险一金全额缴纳，年终奖丰厚
● [发展历史]: 1987年成立于深圳
● [财报数据]: 2024年营收8621亿元
这一行没有项目符号，不应出现
**[RADAR_DATA]薪资待遇:9,工作福利:8,工作强度:3,晋升空间:7[/RADAR_DATA]**
[EXPLAIN]薪资待遇:行业顶尖,工作福利:保障完善,工作强度:加班较多,晋升空间:通道清晰[/EXPLAIN]
"""

TEXT_FIELDS = ("is_fortune500", "benefits_and_career", "history_and_future", "latest_news")


def _values(scores):
    return [s.value for s in scores]


def test_full_reply_is_parsed_into_every_field():
    info = normalize_response(SAMPLE_REPLY, [], "华为")

    assert info.name == "华为"
    assert info.is_fortune500 == "● [世界500强]: 华为是世界500强企业，排名第103位"
    assert info.benefits_and_career == "● [薪酬福利]: 五险一金全额缴纳，年终奖丰厚"
    assert info.history_and_future == "● [发展历史]: 1987年成立于深圳"
    assert info.latest_news == "● [财报数据]: 2024年营收8621亿元"
    assert info.scores == (
        RadarScore("薪资待遇", 9),
        RadarScore("工作福利", 8),
        RadarScore("工作强度", 3),
        RadarScore("晋升空间", 7),
    )
    assert info.score_explanations == {
        "薪资待遇": "行业顶尖",
        "工作福利": "保障完善",
        "工作强度": "加班较多",
        "晋升空间": "通道清晰",
    }
    assert info.confirmed_fortune500 is True


def test_tagged_blocks_do_not_leak_into_buckets():
    info = normalize_response(SAMPLE_REPLY, [], "华为")
    for name in TEXT_FIELDS:
        value = getattr(info, name)
        assert "RADAR_DATA" not in value
        assert "EXPLAIN" not in value


def test_missing_radar_block_gives_default_scores_in_subject_order():
    info = normalize_response("● [地位]: 行业龙头", [], "X")
    assert info.scores == default_scores()
    assert [s.subject for s in info.scores] == list(SCORE_SUBJECTS)
    assert _values(info.scores) == [5, 5, 5, 5]


def test_non_numeric_value_falls_back_for_that_pair_only():
    scores = parse_scores("薪资待遇:高,工作福利:7,工作强度:6,晋升空间:8")
    assert _values(scores) == [5, 7, 6, 8]
    assert scores[0].subject == "薪资待遇"


def test_score_values_use_leading_integer():
    scores = parse_scores(" 薪资待遇 : 8分,工作福利:10 ,工作强度:6.5,晋升空间:")
    assert _values(scores) == [8, 10, 6, 5]
    assert scores[0].subject == "薪资待遇"


def test_out_of_range_scores_are_kept():
    assert _values(parse_scores("a:11,b:0,c:-2,d:3")) == [11, 0, -2, 3]


def test_labels_are_not_checked_against_fixed_subjects():
    scores = parse_scores("a:1,b:2,c:3,d:4")
    assert [s.subject for s in scores] == ["a", "b", "c", "d"]


def test_wrong_pair_count_discards_whole_block():
    assert parse_scores("薪资待遇:9,工作福利:8,工作强度:3") == default_scores()
    assert parse_scores("a:1,b:2,c:3,d:4,e:5") == default_scores()
    assert parse_scores("") == default_scores()


def test_empty_label_discards_whole_block():
    assert parse_scores("薪资待遇:9,:8,工作强度:3,晋升空间:7") == default_scores()


def test_extract_block_reads_first_and_removes_all():
    content, rest = extract_block("x[T]1[/T]y[T]2[/T]z", "[T]", "[/T]")
    assert content == "1"
    assert rest == "xyz"


def test_extract_block_without_close_tag_leaves_text_alone():
    assert extract_block("a[T]b", "[T]", "[/T]") == (None, "a[T]b")
    assert extract_block("a[/T]b", "[T]", "[/T]") == (None, "a[/T]b")


def test_extract_block_spans_lines():
    content, rest = extract_block("a\n[T]1,\n2[/T]\nb", "[T]", "[/T]")
    assert content == "1,\n2"
    assert rest == "a\n\nb"


def test_repeated_radar_blocks_use_first_only():
    text = (
        "[RADAR_DATA]薪资待遇:9,工作福利:8,工作强度:3,晋升空间:7[/RADAR_DATA]\n"
        "● [行业地位]: 龙头\n"
        "[RADAR_DATA]薪资待遇:1,工作福利:1,工作强度:1,晋升空间:1[/RADAR_DATA]"
    )
    info = normalize_response(text, [], "X")
    assert _values(info.scores) == [9, 8, 3, 7]
    assert info.is_fortune500 == "● [行业地位]: 龙头"


def test_explanation_pairs_missing_a_side_are_dropped():
    assert parse_explanations("薪资待遇:好,工作福利,工作强度:,:无名,晋升空间: 快 ") == {
        "薪资待遇": "好",
        "晋升空间": "快",
    }


def test_missing_explain_block_gives_empty_mapping():
    assert parse_explanations(None) == {}
    info = normalize_response("● [地位]: 排名第5", [], "X")
    assert info.score_explanations == {}
    assert info.explanation_for("薪资待遇") is None


def test_empty_reply_yields_sentinels_everywhere():
    for raw in ("", None):
        info = normalize_response(raw, None, "X")
        for name in TEXT_FIELDS:
            assert getattr(info, name) == BUCKET_DEFAULTS[name]
        assert info.scores == default_scores()
        assert info.sources == ()


def test_empty_reply_placeholder_is_not_a_bullet():
    assert bullet_lines(EMPTY_REPLY_TEXT) == []


def test_unmatched_bullet_line_is_dropped_from_all_buckets():
    info = normalize_response("● [其他]: 无关内容", [], "X")
    for name in TEXT_FIELDS:
        assert getattr(info, name) == BUCKET_DEFAULTS[name]


def test_line_with_two_benefit_keywords_appears_once():
    line = "● [福利晋升]: 福利完善，晋升透明"
    info = normalize_response(line, [], "X")
    assert info.benefits_and_career == line


def test_line_can_land_in_several_buckets():
    line = "● [排名与发展]: 排名第12，发展迅速"
    assert classify_line(line) == {"is_fortune500", "history_and_future"}
    info = normalize_response(line, [], "X")
    assert info.is_fortune500 == line
    assert info.history_and_future == line


def test_bucket_keeps_original_order_and_indentation():
    text = "  ● [地位一]: 排名第1\n非项目行 排名\n● [地位二]: 量级巨大"
    assert bucket_lines(bullet_lines(text))["is_fortune500"] == "  ● [地位一]: 排名第1\n● [地位二]: 量级巨大"


def test_classifier_is_driven_by_table():
    table = {"tech": ("芯片",), "money": ("营收",)}
    assert classify_line("● [芯片营收]: 芯片营收增长", table) == {"tech", "money"}
    assert classify_line("● [其他]: 无", table) == frozenset()
    out = bucket_lines(["● [芯片]: 芯片"], table, {"tech": "-", "money": "none"})
    assert out == {"tech": "● [芯片]: 芯片", "money": "none"}


def test_markdown_is_stripped_from_every_field():
    assert strip_markdown("## 字节跳动**是**500强") == " 字节跳动是500强"
    text = "● [地位]: ## 字节跳动**是**500强\n● [福利]: **六险**一金\n### ● [历史]: 2012年创立"
    info = normalize_response(text, [], "字节跳动")
    for name in TEXT_FIELDS:
        value = getattr(info, name)
        assert "#" not in value
        assert "*" not in value
    assert info.history_and_future == " ● [历史]: 2012年创立"


def test_fortune500_predicate():
    assert is_confirmed_fortune500("● [500强地位]: 是世界500强企业，排名第87位")
    assert is_confirmed_fortune500("● [榜单]: 是中国500强企业")
    assert is_confirmed_fortune500("● [榜单]: 入选500强，排名第3")
    assert not is_confirmed_fortune500("● [500强地位]: 暂未进入500强名单")
    assert not is_confirmed_fortune500("● [500强地位]: 不属于世界500强，但是中国500强")
    assert not is_confirmed_fortune500("● [行业地位]: 国内排名第二")
    assert not is_confirmed_fortune500(BUCKET_DEFAULTS["is_fortune500"])


def test_fortune500_flag_is_recomputed_from_bucket_text():
    info = CompanyInfo(
        name="X",
        is_fortune500="● [500强地位]: 暂未进入500强名单",
        benefits_and_career="-",
        history_and_future="-",
        latest_news="-",
    )
    assert info.confirmed_fortune500 is False


def test_sources_keep_web_chunks_in_order():
    chunks = [
        {"type": "url_citation", "url": "https://a.example/1", "title": "A"},
        {"type": "file_citation", "file_id": "file-1", "title": "internal"},
        {"type": "url_citation", "url": "https://b.example/2", "title": "B"},
    ]
    assert assemble_sources(chunks) == (
        Source("A", "https://a.example/1"),
        Source("B", "https://b.example/2"),
    )


def test_sources_fill_missing_title_and_uri():
    chunks = [
        {"type": "url_citation", "url": "https://a.example", "title": ""},
        SimpleNamespace(type="url_citation", url=None, title="B"),
    ]
    assert assemble_sources(chunks) == (
        Source("外部来源", "https://a.example"),
        Source("B", "#"),
    )


def test_duplicate_sources_are_kept():
    chunk = {"type": "url_citation", "url": "https://a.example", "title": "A"}
    info = normalize_response(SAMPLE_REPLY, [chunk, chunk], "华为")
    assert len(info.sources) == 2


def test_score_for_missing_subject_is_zero():
    info = normalize_response("[RADAR_DATA]a:1,b:2,c:3,d:4[/RADAR_DATA]", [], "X")
    assert info.score_for("a") == 1
    assert info.score_for("薪资待遇") == 0


def test_to_dict_is_plain_data():
    d = normalize_response(SAMPLE_REPLY, [{"type": "url_citation", "url": "u", "title": "t"}], "华为").to_dict()
    assert d["scores"][0] == {"subject": "薪资待遇", "value": 9}
    assert d["sources"] == [{"title": "t", "uri": "u"}]
    assert d["score_explanations"]["工作强度"] == "加班较多"


def test_fortune500_predicate_lives_on_the_data_model():
    import company_scout.models as models
    import company_scout.response_parser as parser

    assert parser.is_confirmed_fortune500 is models.is_confirmed_fortune500
    info = models.CompanyInfo(
        name="X",
        is_fortune500="● [500强地位]: 是世界500强企业，排名第87位",
        benefits_and_career="-",
        history_and_future="-",
        latest_news="-",
    )
    assert info.confirmed_fortune500 is True
