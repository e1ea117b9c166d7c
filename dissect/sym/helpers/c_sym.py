from dissect.cstruct import cstruct

sym_def = """
/////////////////////////////////////////////////////////////////////////
// SYM file header
/////////////////////////////////////////////////////////////////////////
struct FileHeader {
    char    signature[3];       // "MND"
    uint8   version;
    uint8   target_unit;
    char    reserved[3];
};

/////////////////////////////////////////////////////////////////////////
// Symbol records
/////////////////////////////////////////////////////////////////////////
enum Kind : uint8 {
    NAME1       = 0x01,         // Local name, value is the address
    NAME2       = 0x02,         // Global name, value is the address
    DEF         = 0x94,         // Definition
    DEF2        = 0x96,         // Definition with dimensions and tag
    OVERLAY     = 0x98,         // Overlay, value is the load address
};

// Storage classes of definitions
enum Class : uint16 {
    AUTO        = 0x0001,       // Storage class auto
    EXT         = 0x0002,       // Storage class extern
    STAT        = 0x0003,       // Storage class static
    REG         = 0x0004,       // Storage class register
    LABEL       = 0x0006,
    MOS         = 0x0008,       // Member of struct
    ARG         = 0x0009,
    STRTAG      = 0x000A,       // Struct tag
    MOU         = 0x000B,       // Member of union
    UNTAG       = 0x000C,       // Union tag
    TPDEF       = 0x000D,       // Storage class typedef
    ENTAG       = 0x000F,       // Enum tag
    MOE         = 0x0010,       // Member of enum
    REGPARM     = 0x0011,
    FIELD       = 0x0012,       // Bitfield
    EOS         = 0x0066,       // End of symbols
};

struct SymbolHeader {
    uint32      value;          // Address or value of the symbol
    Kind        kind;
};

struct String {
    uint8       length;
    char        value[length];
};

struct DefHeader {
    Class       sclass;
    uint16      type;
    uint32      size;
};

struct Overlay {
    uint32      length;         // Length of the overlay in bytes
    uint32      id;
};

/////////////////////////////////////////////////////////////////////////
// Encoded types
//
// bits 0-3     base type
// bits 4-15    six 2-bit modifier slots, outermost first
/////////////////////////////////////////////////////////////////////////
enum Base : uint8 {
    NULL        = 0x0,
    VOID        = 0x1,
    CHAR        = 0x2,
    SHORT       = 0x3,
    INT         = 0x4,
    LONG        = 0x5,
    FLOAT       = 0x6,
    DOUBLE      = 0x7,
    STRUCT      = 0x8,          // Struct tag reference
    UNION       = 0x9,          // Union tag reference
    ENUM        = 0xA,          // Enum tag reference
    MOE         = 0xB,          // Member of enum
    UCHAR       = 0xC,
    USHORT      = 0xD,
    UINT        = 0xE,
    ULONG       = 0xF,
};

enum TypeMod : uint8 {
    PTR         = 0x1,          // Pointer
    FCN         = 0x2,          // Function
    ARY         = 0x3,          // Array
};
"""

c_sym = cstruct().load(sym_def)

SYM_SIGNATURE = b"MND"

SYMBOL_HEADER_SIZE = len(c_sym.SymbolHeader)
DEF_HEADER_SIZE = len(c_sym.DefHeader)
OVERLAY_SIZE = len(c_sym.Overlay)

# Size of the length prefix of a string and of a dimension entry
STRING_LENGTH_SIZE = len(c_sym.uint8)
DIMENSION_SIZE = len(c_sym.uint16)

KIND_LABELS = {
    c_sym.Kind.NAME1: "1",
    c_sym.Kind.NAME2: "2",
    c_sym.Kind.DEF: "94 Def",
    c_sym.Kind.DEF2: "96 Def2",
    c_sym.Kind.OVERLAY: "overlay",
}

TAG_CLASSES = (c_sym.Class.STRTAG, c_sym.Class.UNTAG, c_sym.Class.ENTAG)
MEMBER_CLASSES = (c_sym.Class.MOS, c_sym.Class.MOU, c_sym.Class.FIELD)


def kind_label(kind: int) -> str:
    """Return the listing label of a symbol kind, unknown kinds are printed as hex."""
    try:
        return KIND_LABELS[kind]
    except KeyError:
        return f"{int(kind):02x}"


def class_label(sclass: int) -> str:
    """Return the short name of a storage class, e.g. ``MOS`` or ``TPDEF``."""
    name = getattr(sclass, "name", None)
    if name:
        return name
    return f"Class(0x{int(sclass):02x})"
