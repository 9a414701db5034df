from models.parts_lookup import CatalogAssemblyGroup as Group

# Assembly groups as TecDoc reports them for passenger cars (names as delivered
# for the Norwegian catalogue). Used to offer filters without a round trip.

ALL_PARTS_GROUP_ID = 100002
BRAKE_SYSTEM_GROUP_ID = 100006
DISC_BRAKE_GROUP_ID = 100626
DRUM_BRAKE_GROUP_ID = 100627
BRAKE_CALIPER_GROUP_ID = 100027

PARENT_ASSEMBLY_GROUPS = [
    Group(id=BRAKE_SYSTEM_GROUP_ID, name="Bremseanlegg", has_children=True),
    Group(id=BRAKE_CALIPER_GROUP_ID, name="Bremsecaliper", has_children=True, parent_id=BRAKE_SYSTEM_GROUP_ID),
    Group(id=102224, name="høyytelse bremse", has_children=True, parent_id=BRAKE_SYSTEM_GROUP_ID),
    Group(id=DISC_BRAKE_GROUP_ID, name="Skivebremse", has_children=True, parent_id=BRAKE_SYSTEM_GROUP_ID),
    Group(id=DRUM_BRAKE_GROUP_ID, name="Trommelbremse", has_children=True, parent_id=BRAKE_SYSTEM_GROUP_ID),
    Group(id=100400, name="Akseldrift", has_children=True),
    Group(id=100043, name="Belysning", has_children=True),
    Group(id=100100, name="Engine", has_children=True),
    Group(id=100200, name="Suspension", has_children=True),
    Group(id=100300, name="Electrical System", has_children=True),
]

BRAKE_ASSEMBLY_GROUPS = [
    Group(id=BRAKE_SYSTEM_GROUP_ID, name="Bremseanlegg", has_children=True),
    # Calipers
    Group(id=BRAKE_CALIPER_GROUP_ID, name="Bremsecaliper", has_children=True, parent_id=BRAKE_SYSTEM_GROUP_ID),
    Group(id=100807, name="Bremsecaliper / -holder (bærer)", parent_id=BRAKE_CALIPER_GROUP_ID, has_children=False),
    # Components
    Group(id=100025, name="Bremseforsterker", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    Group(id=100037, name="Bremsekraft regulator", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    Group(id=102248, name="Bremselysbryter", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    Group(id=100035, name="Bremseslanger", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    Group(id=102208, name="Bremsevæske", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    Group(id=100029, name="Bremsevæske / -tank", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    Group(id=100026, name="Hovedbremsesylinder", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    Group(id=100034, name="Parkeringsbrems", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    # Disc brakes
    Group(id=DISC_BRAKE_GROUP_ID, name="Skivebremse", has_children=True, parent_id=BRAKE_SYSTEM_GROUP_ID),
    Group(id=100030, name="Bremsebelegg", parent_id=DISC_BRAKE_GROUP_ID, has_children=False),
    Group(id=102244, name="bremsesett", parent_id=DISC_BRAKE_GROUP_ID, has_children=False),
    Group(id=100032, name="Bremseskive", parent_id=DISC_BRAKE_GROUP_ID, has_children=False),
    # Drum brakes
    Group(id=DRUM_BRAKE_GROUP_ID, name="Trommelbremse", has_children=True, parent_id=BRAKE_SYSTEM_GROUP_ID),
    Group(id=100031, name="Bremsebelegg / -sko", parent_id=DRUM_BRAKE_GROUP_ID, has_children=False),
    Group(id=102763, name="bremsesett", parent_id=DRUM_BRAKE_GROUP_ID, has_children=False),
    Group(id=100033, name="Bremsetrommel", parent_id=DRUM_BRAKE_GROUP_ID, has_children=False),
]

COMMON_ASSEMBLY_GROUPS = [
    Group(id=ALL_PARTS_GROUP_ID, name="All Parts", description="All compatible parts for the vehicle"),
    Group(id=BRAKE_SYSTEM_GROUP_ID, name="Bremseanlegg", description="Complete brake system components", has_children=True),
    Group(id=100032, name="Bremseskive", description="Brake rotors/discs", parent_id=DISC_BRAKE_GROUP_ID, has_children=False),
    Group(id=100030, name="Bremsebelegg", description="Brake pads", parent_id=DISC_BRAKE_GROUP_ID, has_children=False),
    Group(id=BRAKE_CALIPER_GROUP_ID, name="Bremsecaliper", description="Brake calipers", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=True),
    Group(id=100033, name="Bremsetrommel", description="Brake drums", parent_id=DRUM_BRAKE_GROUP_ID, has_children=False),
    Group(id=100031, name="Bremsebelegg / -sko", description="Brake shoes", parent_id=DRUM_BRAKE_GROUP_ID, has_children=False),
    Group(id=102208, name="Bremsevæske", description="Brake fluid", parent_id=BRAKE_SYSTEM_GROUP_ID, has_children=False),
    Group(id=100100, name="Engine", description="Engine components and parts", has_children=True),
    Group(id=100200, name="Suspension", description="Suspension system components", has_children=True),
    Group(id=100300, name="Electrical System", description="Electrical system components", has_children=True),
    Group(id=100043, name="Belysning", description="Vehicle lighting components", has_children=True),
]
