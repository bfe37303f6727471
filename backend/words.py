"""Static word bank for secret word selection."""

import random
from typing import Dict, List, Optional

WORDS: Dict[str, Dict[str, List[str]]] = {
    "FOOD": {
        "EASY": ["Pizza", "Apple", "Bread", "Cake", "Ice Cream", "Banana", "Sandwich", "Milk", "Cookie", "Cheese"],
        "MEDIUM": ["Spaghetti", "Hamburger", "Popcorn", "Salad", "Muffin", "Taco", "Yogurt", "Cereal", "Peanut Butter", "Chicken"],
        "HARD": ["Croissant", "Quiche", "Sushi", "Ravioli", "Guacamole", "Eggplant", "Avocado", "Falafel", "Pomegranate", "Wasabi"],
    },
    "ANIMALS": {
        "EASY": ["Dog", "Cat", "Cow", "Fish", "Horse", "Duck", "Bird", "Pig", "Rabbit", "Lion"],
        "MEDIUM": ["Elephant", "Giraffe", "Kangaroo", "Panda", "Penguin", "Zebra", "Bear", "Monkey", "Snake", "Dolphin"],
        "HARD": ["Armadillo", "Platypus", "Narwhal", "Chameleon", "Wombat", "Axolotl", "Sloth", "Tarantula", "Iguana", "Hedgehog"],
    },
    "MOVIES_TV": {
        "EASY": ["Frozen", "Toy Story", "Spider-Man", "Minions", "Batman", "Cars", "Moana", "Shrek", "Harry Potter", "Star Wars"],
        "MEDIUM": ["Jurassic Park", "Finding Nemo", "Black Panther", "Aladdin", "Lion King", "Home Alone", "E.T.", "Cinderella", "Encanto", "Up"],
        "HARD": ["Inception", "Casablanca", "The Godfather", "Parasite", "Interstellar", "Amélie", "Jaws", "Titanic", "La La Land", "Gladiator"],
    },
    "SPORTS": {
        "EASY": ["Soccer", "Basketball", "Baseball", "Football", "Tennis", "Hockey", "Golf", "Swimming", "Running", "Volleyball"],
        "MEDIUM": ["Badminton", "Bowling", "Rugby", "Skateboarding", "Surfing", "Lacrosse", "Karate", "Gymnastics", "Archery", "Dodgeball"],
        "HARD": ["Polo", "Curling", "Fencing", "Equestrian", "Biathlon", "Triathlon", "Javelin", "Bocce", "Squash", "Cricket"],
    },
    "PLACES": {
        "EASY": ["School", "Park", "Beach", "Home", "Zoo", "Farm", "Playground", "Mall", "Hospital", "Library"],
        "MEDIUM": ["City Hall", "Stadium", "Airport", "Theater", "Aquarium", "Museum", "Restaurant", "Castle", "Mountain", "Bridge"],
        "HARD": ["Pyramids", "Eiffel Tower", "Great Wall", "Taj Mahal", "Colosseum", "Machu Picchu", "Stonehenge", "Sydney Opera House", "Statue of Liberty", "Mount Everest"],
    },
    "JOBS": {
        "EASY": ["Teacher", "Doctor", "Chef", "Farmer", "Nurse", "Firefighter", "Police Officer", "Singer", "Athlete", "Pilot"],
        "MEDIUM": ["Librarian", "Engineer", "Lawyer", "Dancer", "Mechanic", "Scientist", "Actor", "Author", "Soldier", "Baker"],
        "HARD": ["Archaeologist", "Astronomer", "Mathematician", "Fashion Designer", "Diplomat", "Geologist", "Biologist", "Sculptor", "Politician", "Architect"],
    },
    "OBJECTS": {
        "EASY": ["Ball", "Chair", "Book", "Phone", "Bed", "Table", "Shoes", "Hat", "Pen", "Clock"],
        "MEDIUM": ["Backpack", "Camera", "Guitar", "Bicycle", "Umbrella", "Mirror", "Radio", "Blanket", "Suitcase", "Microwave"],
        "HARD": ["Telescope", "Typewriter", "Microscope", "Projector", "Compass", "Thermometer", "Accordion", "Saxophone", "Sewing Machine", "Drone"],
    },
    "VEHICLES": {
        "EASY": ["Car", "Bus", "Bike", "Boat", "Truck", "Train", "Plane", "Taxi", "Van", "Scooter"],
        "MEDIUM": ["Helicopter", "Motorcycle", "Sailboat", "Tractor", "Submarine", "Jeep", "Limousine", "Hot Air Balloon", "Skateboard", "Rocket"],
        "HARD": ["Segway", "Monorail", "Rickshaw", "Gondola", "Hovercraft", "Cable Car", "Zeppelin", "Tuk Tuk", "Snowmobile", "Amphibious Vehicle"],
    },
    "HOLIDAYS": {
        "EASY": ["Birthday", "Christmas", "Halloween", "Easter", "New Year", "Thanksgiving", "Wedding", "Graduation", "Valentine's Day", "Party"],
        "MEDIUM": ["Fireworks", "Parade", "Pumpkin", "Santa Claus", "Hanukkah", "Costume", "Cake", "Gift", "Balloon", "Turkey"],
        "HARD": ["Piñata", "Diwali", "Ramadan", "Kwanzaa", "Lantern Festival", "Oktoberfest", "Mardi Gras", "Passover", "Holi", "Cinco de Mayo"],
    },
    "SCHOOL": {
        "EASY": ["Teacher", "Desk", "Book", "Pencil", "Eraser", "Notebook", "Ruler", "Backpack", "Lunch", "Bus"],
        "MEDIUM": ["Calculator", "Globe", "Blackboard", "Test", "Science", "History", "Dictionary", "Marker", "Recess", "Homework"],
        "HARD": ["Microscope", "Thesis", "Graduation", "Laboratory", "Debate", "Scholarship", "Periodic Table", "Geometry", "Physics", "Biology"],
    },
    "SILLY": {
        "EASY": ["Banana Peel", "Unicorn", "Slime", "Chicken Nugget", "Bubble", "Robot", "Pickle", "Mustache", "Toilet", "Clown"],
        "MEDIUM": ["Rubber Chicken", "Disco Ball", "Llama", "Kazoo", "Waffle", "Flamingo", "Donut", "Pirate", "Dinosaur Costume", "Taco Truck"],
        "HARD": ["Whoopee Cushion", "Platypus", "Loch Ness Monster", "Yeti", "Marshmallow Cannon", "Giant Rubber Duck", "Sasquatch", "Narwhal", "UFO", "Time Machine"],
    },
    "FANTASY": {
        "EASY": ["Dragon", "Fairy", "Wizard", "Giant", "Mermaid", "Troll", "Elf", "Unicorn", "Witch", "Knight"],
        "MEDIUM": ["Griffin", "Phoenix", "Centaur", "Minotaur", "Pegasus", "Cyclops", "Goblin", "Genie", "Werewolf", "Vampire"],
        "HARD": ["Chimera", "Kraken", "Basilisk", "Hydra", "Leviathan", "Banshee", "Sphinx", "Thunderbird", "Golem", "Djinn"],
    },
    "TECHNOLOGY": {
        "EASY": ["Phone", "Laptop", "TV", "Headphones", "Camera", "Tablet", "Mouse", "Keyboard", "Watch", "Remote"],
        "MEDIUM": ["Drone", "Printer", "Microphone", "Projector", "Smartwatch", "Video Game", "Calculator", "Telescope", "Robot", "Flashlight"],
        "HARD": ["3D Printer", "Virtual Reality", "Quantum Computer", "Satellite", "Supercomputer", "Nanobot", "Hoverboard", "AI Assistant", "Cryptominer", "Hologram"],
    },
    "NATURE": {
        "EASY": ["Tree", "Rock", "River", "Sun", "Moon", "Flower", "Grass", "Mountain", "Cloud", "Leaf"],
        "MEDIUM": ["Volcano", "Glacier", "Canyon", "Desert", "Jungle", "Waterfall", "Ocean", "Storm", "Rainbow", "Cave"],
        "HARD": ["Aurora Borealis", "Tsunami", "Earthquake", "Meteor", "Eclipse", "Black Hole", "Sandstorm", "Tornado", "Coral Reef", "Fossil"],
    },
    "MUSIC": {
        "EASY": ["Guitar", "Piano", "Song", "Dance", "Singer", "Drum", "Radio", "Movie", "Game", "Stage"],
        "MEDIUM": ["Violin", "Trumpet", "DJ", "Orchestra", "Actor", "Musical", "Karaoke", "Popcorn", "Audience", "Costume"],
        "HARD": ["Didgeridoo", "Harpsichord", "Theremin", "Sitar", "Bagpipes", "Sousaphone", "Ballet", "Opera", "Mime", "Shakespeare"],
    },
}

CATEGORY_META = {
    "FOOD": {"name": "Food", "emoji": "🍕"},
    "ANIMALS": {"name": "Animals", "emoji": "🦁"},
    "MOVIES_TV": {"name": "Movies & TV", "emoji": "🎬"},
    "SPORTS": {"name": "Sports & Games", "emoji": "⚽"},
    "PLACES": {"name": "Places", "emoji": "🗺️"},
    "JOBS": {"name": "Jobs", "emoji": "👨‍💼"},
    "OBJECTS": {"name": "Objects", "emoji": "📦"},
    "VEHICLES": {"name": "Vehicles", "emoji": "🚗"},
    "HOLIDAYS": {"name": "Holidays", "emoji": "🎉"},
    "SCHOOL": {"name": "School", "emoji": "📚"},
    "SILLY": {"name": "Silly & Random", "emoji": "🤪"},
    "FANTASY": {"name": "Fantasy", "emoji": "🐉"},
    "TECHNOLOGY": {"name": "Technology", "emoji": "💻"},
    "NATURE": {"name": "Nature", "emoji": "🌲"},
    "MUSIC": {"name": "Music", "emoji": "🎵"},
}


def get_words(category: str, difficulty: str) -> List[str]:
    # Category and Difficulty are str enums, so they index this table directly.
    try:
        return WORDS[category][difficulty]
    except KeyError:
        raise ValueError(f"No words for category {category!r} at difficulty {difficulty!r}")


def get_random_word(category: str, difficulty: str,
                    rng: Optional[random.Random] = None) -> str:
    """Pick one word uniformly at random. Repeats across rounds are allowed."""
    return (rng or random).choice(get_words(category, difficulty))


def get_categories() -> list:
    return [{"id": cid, **meta} for cid, meta in CATEGORY_META.items()]
