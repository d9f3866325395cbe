"""Static character catalog: display metadata plus a base prompt fragment per character."""

from typing import Literal

from pydantic import BaseModel

CharacterCategory = Literal["anime", "games", "movies"]

_THUMBNAIL = "https://images.unsplash.com/{photo}?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=400"


class Character(BaseModel):
    id: str
    name: str
    category: CharacterCategory
    description: str
    image_url: str
    base_prompt: str


def _character(
    id: str,
    name: str,
    category: CharacterCategory,
    description: str,
    photo: str,
    base_prompt: str,
) -> Character:
    return Character(
        id=id,
        name=name,
        category=category,
        description=description,
        image_url=_THUMBNAIL.format(photo=photo),
        base_prompt=base_prompt,
    )


CHARACTERS: tuple[Character, ...] = (
    # Anime
    _character(
        "naruto", "Naruto", "anime", "Ninja Hero with orange outfit",
        "photo-1578662996442-48f60103fc96",
        "orange ninja outfit, spiky blonde hair, determined expression, dynamic action pose",
    ),
    _character(
        "goku", "Goku", "anime", "Saiyan Warrior with spiky hair",
        "photo-1571019613454-1cb2f99b2d8b",
        "spiky black hair, orange martial arts gi, muscular build, energy aura, fighting stance",
    ),
    _character(
        "luffy", "Luffy", "anime", "Pirate Captain with straw hat",
        "photo-1551698618-1dfe5d97d256",
        "straw hat, red vest, cheerful smile, rubber powers, pirate captain pose",
    ),
    _character(
        "sasuke", "Sasuke", "anime", "Rival Ninja with dark clothing",
        "photo-1578662996442-48f60103fc96",
        "dark ninja outfit, black hair, serious expression, lightning chakra effects",
    ),
    _character(
        "todoroki", "Todoroki", "anime", "Ice Fire Hero with split hair",
        "photo-1571019613454-1cb2f99b2d8b",
        "split red and white hair, dual-colored eyes, ice and fire powers",
    ),
    _character(
        "tanjiro", "Tanjiro", "anime", "Demon Slayer with checkered pattern",
        "photo-1507003211169-0a1dd7228f2d",
        "checkered haori, gentle expression, katana sword, demon slayer",
    ),
    # Games
    _character(
        "mario", "Mario", "games", "Super Plumber with red cap",
        "photo-1606144042614-b2417e99c4e3",
        "red cap with M logo, blue overalls, mustache, cheerful jumping pose",
    ),
    _character(
        "link", "Link", "games", "Hyrule Hero in green tunic",
        "photo-1551698618-1dfe5d97d256",
        "green tunic, pointed ears, master sword, hylian shield, heroic stance",
    ),
    _character(
        "masterchief", "Master Chief", "games", "Spartan Soldier in green armor",
        "photo-1578662996442-48f60103fc96",
        "green MJOLNIR armor, helmet visor, military stance, futuristic weapons",
    ),
    _character(
        "lara", "Lara Croft", "games", "Tomb Raider with explorer outfit",
        "photo-1544005313-94ddf0286df2",
        "explorer outfit, brown hair, twin pistols, adventure archaeologist",
    ),
    _character(
        "sonic", "Sonic", "games", "Blue Speedster with red shoes",
        "photo-1551698618-1dfe5d97d256",
        "blue hedgehog, spiky quills, red sneakers, speed effects, running pose",
    ),
    _character(
        "kratos", "Kratos", "games", "God of War with dual axes",
        "photo-1571019613454-1cb2f99b2d8b",
        "bald head, red markings, muscular build, dual axes, warrior stance",
    ),
    # Movies
    _character(
        "ironman", "Iron Man", "movies", "Armored Avenger with arc reactor",
        "photo-1635805737707-575885ab0820",
        "red and gold armor, arc reactor, repulsors, high-tech suit, flying pose",
    ),
    _character(
        "batman", "Batman", "movies", "Dark Knight with cape and cowl",
        "photo-1581833971358-2c8b550f87b3",
        "black cape, cowl mask, bat symbol, dark armor, brooding pose on rooftop",
    ),
    _character(
        "wonderwoman", "Wonder Woman", "movies", "Amazon Warrior with golden tiara",
        "photo-1544005313-94ddf0286df2",
        "golden tiara, red and blue outfit, lasso of truth, warrior stance",
    ),
    _character(
        "spiderman", "Spider-Man", "movies", "Wall Crawler with web pattern",
        "photo-1635805737707-575885ab0820",
        "red and blue suit, web pattern, web-slinging pose, dynamic movement",
    ),
)

_BY_ID: dict[str, Character] = {character.id: character for character in CHARACTERS}


def get_character(character_id: str) -> Character | None:
    return _BY_ID.get(character_id)


def get_characters_by_category(category: CharacterCategory) -> list[Character]:
    return [character for character in CHARACTERS if character.category == category]


def base_prompt_for(character_id: str) -> str:
    """Prompt fragment for a character, or a generic one for ids outside the catalog."""
    character = _BY_ID.get(character_id)
    if character is None:
        return f"{character_id} character"
    return character.base_prompt
