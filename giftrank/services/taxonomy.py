"""
Gift taxonomy: four groups of overlapping tags

Tag ids are dot separated (``recipients.men``). Each tag carries a pattern
matched against the lower-cased ``title + " " + query`` of a gift.
"""

import re
from typing import Dict, Iterable, List, Optional

from ..schemas.gift import GiftItem


class TaxonomyTag:
    """A single tag with its Ukrainian label and matching pattern"""

    def __init__(self, tag_id: str, label: str, pattern: str):
        self.id = tag_id
        self.label = label
        self.pattern = re.compile(pattern, re.IGNORECASE)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None

    def __repr__(self):
        return f"<TaxonomyTag(id='{self.id}')>"


class TaxonomyGroup:
    """Top-level taxonomy group"""

    def __init__(self, group_id: str, label: str, emoji: str, tags: List[TaxonomyTag]):
        self.id = group_id
        self.label = label
        self.emoji = emoji
        self.tags = tags

    def __repr__(self):
        return f"<TaxonomyGroup(id='{self.id}', tags={len(self.tags)})>"


TAXONOMY: List[TaxonomyGroup] = [
    TaxonomyGroup("recipients", "Отримувачі", "👥", [
        TaxonomyTag("recipients.men", "Чоловікам",
                    r"чоловік|хлопц|мужч|другу\b|сину\b|брату\b|тато"),
        TaxonomyTag("recipients.women", "Жінкам",
                    r"жінк|дівчин|дружин|подруз|дочц|матус|коханій"),
        TaxonomyTag("recipients.colleagues", "Колегам та Керівництву",
                    r"колег|шефу|начальник|керівник|корпоратив"),
        TaxonomyTag("recipients.military", "Військовим",
                    r"військов|зсу\b|армі|захисник|бойов"),
        TaxonomyTag("recipients.children", "Дітям та Підліткам",
                    r"дітям|дівчатк|хлопчик|підлітк|школяр|дитин|дітей"),
        TaxonomyTag("recipients.special", "Спеціальні",
                    r"одногрупник|у якого все є|іноземц"),
    ]),
    TaxonomyGroup("occasions", "Поводи та події", "🎉", [
        TaxonomyTag("occasions.birthday", "День народження",
                    r"день народження|на народження|іменини"),
        TaxonomyTag("occasions.anniversary", "Ювілеї (12–60 років)",
                    r"\b(12|18|20|25|30|31|40|41|48|50|60)\s*рок|\bювілей\b|повноліт"),
        TaxonomyTag("occasions.new_year", "Новий рік",
                    r"новий рік|новорічн"),
        TaxonomyTag("occasions.holiday", "Свята",
                    r"14 лютого|закоханих|валентин|миколая|захисника"),
        TaxonomyTag("occasions.memory", "На пам'ять / Річниця",
                    r"на пам.ять|річниц|при звільненн"),
    ]),
    TaxonomyGroup("type", "Тип подарунка", "🎁", [
        TaxonomyTag("type.premium", "Елітні та Статусні",
                    r"елітн|ексклюзивн|vip|статусн|брендов|дорог|розкіш"),
        TaxonomyTag("type.original", "Оригінальні / Креативні",
                    r"оригінальн|незвичайн|креативн|унікальн|цікав"),
        TaxonomyTag("type.funny", "Прикольні / З гумором",
                    r"приколь|з гумором|прикол|смішн"),
        TaxonomyTag("type.experience", "Подарунки-враження",
                    r"враження|емоці|сертифікат"),
        TaxonomyTag("type.set", "Готові набори",
                    r"набір|бокс\b|box\b|набор"),
        TaxonomyTag("type.patriotic", "Патріотичні",
                    r"патріот|символік|вишиванк|тризуб"),
        TaxonomyTag("type.practical", "Практичні",
                    r"практичн|корисн|в машину|тактичн"),
        TaxonomyTag("type.tech", "Техніка та Гаджети",
                    r"гаджет|техніка|смарт.годинник|навушник"),
    ]),
    TaxonomyGroup("special", "Специфічні запити", "🔍", [
        TaxonomyTag("special.trends", "Тренди 2026",
                    r"2026|тренд|новинк"),
        TaxonomyTag("special.wishlist", "Що попросити (Wishlist)",
                    r"що попросити|список бажань|wishlist"),
        TaxonomyTag("special.branded", "Брендові",
                    r"бренд"),
    ]),
]

# Tags for items no pattern matched, keyed by their catalogue category
CATEGORY_FALLBACK_TAGS: Dict[str, List[str]] = {
    "Патріотичні": ["type.patriotic"],
    "Військовим": ["recipients.military"],
    "Чоловікам": ["recipients.men"],
    "Жінкам": ["recipients.women"],
    "Подарункові набори": ["type.set"],
}


def iter_tags() -> Iterable[TaxonomyTag]:
    for group in TAXONOMY:
        yield from group.tags


def classify_item(title: str, query: Optional[str] = None) -> List[str]:
    """All tag ids whose pattern matches the title and search query"""

    text = f"{title or ''} {query or ''}".lower()
    return [tag.id for tag in iter_tags() if tag.matches(text)]


def tags_for_item(item: GiftItem) -> List[str]:
    """Pattern tags for an item, or its category fallback when none match"""

    tags = classify_item(item.title, item.query)
    if not tags:
        tags = list(CATEGORY_FALLBACK_TAGS.get(item.category, []))
    return tags


def get_tag_label(tag_id: str) -> Optional[str]:
    """Human-readable label of a tag id, e.g. 'recipients.men' -> 'Чоловікам'"""

    for tag in iter_tags():
        if tag.id == tag_id:
            return tag.label
    return None


def get_group_for_tag(tag_id: str) -> Optional[TaxonomyGroup]:
    """The group that owns a tag id"""

    for group in TAXONOMY:
        if any(tag.id == tag_id for tag in group.tags):
            return group
    return None


def count_for_tag(items: Iterable[GiftItem], tag_id: str) -> int:
    return sum(1 for item in items if tag_id in item.tags)


def count_for_group(items: Iterable[GiftItem], group_id: str) -> int:
    """Distinct items carrying at least one tag of the group"""

    group = next((g for g in TAXONOMY if g.id == group_id), None)
    if group is None:
        return 0

    tag_ids = {tag.id for tag in group.tags}
    return sum(1 for item in items if tag_ids.intersection(item.tags))
