from enum import Enum
from typing import Final, List, NamedTuple, Optional, Tuple


class Operation(Enum):
    """Operation tags for the 6502 instruction set. XXX marks undefined opcodes."""

    ADC = "ADC"
    AND = "AND"
    ASL = "ASL"
    BCC = "BCC"
    BCS = "BCS"
    BEQ = "BEQ"
    BIT = "BIT"
    BMI = "BMI"
    BNE = "BNE"
    BPL = "BPL"
    BRK = "BRK"
    BVC = "BVC"
    BVS = "BVS"
    CLC = "CLC"
    CLD = "CLD"
    CLI = "CLI"
    CLV = "CLV"
    CMP = "CMP"
    CPX = "CPX"
    CPY = "CPY"
    DEC = "DEC"
    DEX = "DEX"
    DEY = "DEY"
    EOR = "EOR"
    INC = "INC"
    INX = "INX"
    INY = "INY"
    JMP = "JMP"
    JSR = "JSR"
    LDA = "LDA"
    LDX = "LDX"
    LDY = "LDY"
    LSR = "LSR"
    NOP = "NOP"
    ORA = "ORA"
    PHA = "PHA"
    PHP = "PHP"
    PLA = "PLA"
    PLP = "PLP"
    ROL = "ROL"
    ROR = "ROR"
    RTI = "RTI"
    RTS = "RTS"
    SBC = "SBC"
    SEC = "SEC"
    SED = "SED"
    SEI = "SEI"
    STA = "STA"
    STX = "STX"
    STY = "STY"
    TAX = "TAX"
    TAY = "TAY"
    TSX = "TSX"
    TXA = "TXA"
    TXS = "TXS"
    TYA = "TYA"
    XXX = "???"


class AddressingMode(Enum):
    IMP = "implied"
    IMM = "immediate"
    ZP0 = "zeropage"
    ZPX = "zeropage_x"
    ZPY = "zeropage_y"
    REL = "relative"
    ABS = "absolute"
    ABX = "absolute_x"
    ABY = "absolute_y"
    IND = "indirect"
    IZX = "indexed_indirect"
    IZY = "indirect_indexed"


_MODE_BYTES: Final[dict] = {
    AddressingMode.IMP: 1,
    AddressingMode.IMM: 2,
    AddressingMode.ZP0: 2,
    AddressingMode.ZPX: 2,
    AddressingMode.ZPY: 2,
    AddressingMode.REL: 2,
    AddressingMode.ABS: 3,
    AddressingMode.ABX: 3,
    AddressingMode.ABY: 3,
    AddressingMode.IND: 3,
    AddressingMode.IZX: 2,
    AddressingMode.IZY: 2,
}


class Instruction(NamedTuple):
    opcode: int
    operation: Operation
    mode: AddressingMode
    cycles: int

    @property
    def illegal(self) -> bool:
        return self.operation is Operation.XXX

    @property
    def bytes(self) -> int:
        return _MODE_BYTES[self.mode]


# Indexed by opcode byte. Undefined opcodes are XXX/IMP with their hardware cycle cost.
INSTRUCTIONS: Final[Tuple[Instruction, ...]] = (
    Instruction(0x00, Operation.BRK, AddressingMode.IMP, 7),
    Instruction(0x01, Operation.ORA, AddressingMode.IZX, 6),
    Instruction(0x02, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x03, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0x04, Operation.XXX, AddressingMode.IMP, 3),
    Instruction(0x05, Operation.ORA, AddressingMode.ZP0, 3),
    Instruction(0x06, Operation.ASL, AddressingMode.ZP0, 5),
    Instruction(0x07, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0x08, Operation.PHP, AddressingMode.IMP, 3),
    Instruction(0x09, Operation.ORA, AddressingMode.IMM, 2),
    Instruction(0x0A, Operation.ASL, AddressingMode.IMP, 2),
    Instruction(0x0B, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x0C, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x0D, Operation.ORA, AddressingMode.ABS, 4),
    Instruction(0x0E, Operation.ASL, AddressingMode.ABS, 6),
    Instruction(0x0F, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x10, Operation.BPL, AddressingMode.REL, 2),
    Instruction(0x11, Operation.ORA, AddressingMode.IZY, 5),
    Instruction(0x12, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x13, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0x14, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x15, Operation.ORA, AddressingMode.ZPX, 4),
    Instruction(0x16, Operation.ASL, AddressingMode.ZPX, 6),
    Instruction(0x17, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x18, Operation.CLC, AddressingMode.IMP, 2),
    Instruction(0x19, Operation.ORA, AddressingMode.ABY, 4),
    Instruction(0x1A, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x1B, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x1C, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x1D, Operation.ORA, AddressingMode.ABX, 4),
    Instruction(0x1E, Operation.ASL, AddressingMode.ABX, 7),
    Instruction(0x1F, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x20, Operation.JSR, AddressingMode.ABS, 6),
    Instruction(0x21, Operation.AND, AddressingMode.IZX, 6),
    Instruction(0x22, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x23, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0x24, Operation.BIT, AddressingMode.ZP0, 3),
    Instruction(0x25, Operation.AND, AddressingMode.ZP0, 3),
    Instruction(0x26, Operation.ROL, AddressingMode.ZP0, 5),
    Instruction(0x27, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0x28, Operation.PLP, AddressingMode.IMP, 4),
    Instruction(0x29, Operation.AND, AddressingMode.IMM, 2),
    Instruction(0x2A, Operation.ROL, AddressingMode.IMP, 2),
    Instruction(0x2B, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x2C, Operation.BIT, AddressingMode.ABS, 4),
    Instruction(0x2D, Operation.AND, AddressingMode.ABS, 4),
    Instruction(0x2E, Operation.ROL, AddressingMode.ABS, 6),
    Instruction(0x2F, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x30, Operation.BMI, AddressingMode.REL, 2),
    Instruction(0x31, Operation.AND, AddressingMode.IZY, 5),
    Instruction(0x32, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x33, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0x34, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x35, Operation.AND, AddressingMode.ZPX, 4),
    Instruction(0x36, Operation.ROL, AddressingMode.ZPX, 6),
    Instruction(0x37, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x38, Operation.SEC, AddressingMode.IMP, 2),
    Instruction(0x39, Operation.AND, AddressingMode.ABY, 4),
    Instruction(0x3A, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x3B, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x3C, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x3D, Operation.AND, AddressingMode.ABX, 4),
    Instruction(0x3E, Operation.ROL, AddressingMode.ABX, 7),
    Instruction(0x3F, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x40, Operation.RTI, AddressingMode.IMP, 6),
    Instruction(0x41, Operation.EOR, AddressingMode.IZX, 6),
    Instruction(0x42, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x43, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0x44, Operation.XXX, AddressingMode.IMP, 3),
    Instruction(0x45, Operation.EOR, AddressingMode.ZP0, 3),
    Instruction(0x46, Operation.LSR, AddressingMode.ZP0, 5),
    Instruction(0x47, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0x48, Operation.PHA, AddressingMode.IMP, 3),
    Instruction(0x49, Operation.EOR, AddressingMode.IMM, 2),
    Instruction(0x4A, Operation.LSR, AddressingMode.IMP, 2),
    Instruction(0x4B, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x4C, Operation.JMP, AddressingMode.ABS, 3),
    Instruction(0x4D, Operation.EOR, AddressingMode.ABS, 4),
    Instruction(0x4E, Operation.LSR, AddressingMode.ABS, 6),
    Instruction(0x4F, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x50, Operation.BVC, AddressingMode.REL, 2),
    Instruction(0x51, Operation.EOR, AddressingMode.IZY, 5),
    Instruction(0x52, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x53, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0x54, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x55, Operation.EOR, AddressingMode.ZPX, 4),
    Instruction(0x56, Operation.LSR, AddressingMode.ZPX, 6),
    Instruction(0x57, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x58, Operation.CLI, AddressingMode.IMP, 2),
    Instruction(0x59, Operation.EOR, AddressingMode.ABY, 4),
    Instruction(0x5A, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x5B, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x5C, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x5D, Operation.EOR, AddressingMode.ABX, 4),
    Instruction(0x5E, Operation.LSR, AddressingMode.ABX, 7),
    Instruction(0x5F, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x60, Operation.RTS, AddressingMode.IMP, 6),
    Instruction(0x61, Operation.ADC, AddressingMode.IZX, 6),
    Instruction(0x62, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x63, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0x64, Operation.XXX, AddressingMode.IMP, 3),
    Instruction(0x65, Operation.ADC, AddressingMode.ZP0, 3),
    Instruction(0x66, Operation.ROR, AddressingMode.ZP0, 5),
    Instruction(0x67, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0x68, Operation.PLA, AddressingMode.IMP, 4),
    Instruction(0x69, Operation.ADC, AddressingMode.IMM, 2),
    Instruction(0x6A, Operation.ROR, AddressingMode.IMP, 2),
    Instruction(0x6B, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x6C, Operation.JMP, AddressingMode.IND, 5),
    Instruction(0x6D, Operation.ADC, AddressingMode.ABS, 4),
    Instruction(0x6E, Operation.ROR, AddressingMode.ABS, 6),
    Instruction(0x6F, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x70, Operation.BVS, AddressingMode.REL, 2),
    Instruction(0x71, Operation.ADC, AddressingMode.IZY, 5),
    Instruction(0x72, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x73, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0x74, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x75, Operation.ADC, AddressingMode.ZPX, 4),
    Instruction(0x76, Operation.ROR, AddressingMode.ZPX, 6),
    Instruction(0x77, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x78, Operation.SEI, AddressingMode.IMP, 2),
    Instruction(0x79, Operation.ADC, AddressingMode.ABY, 4),
    Instruction(0x7A, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x7B, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x7C, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x7D, Operation.ADC, AddressingMode.ABX, 4),
    Instruction(0x7E, Operation.ROR, AddressingMode.ABX, 7),
    Instruction(0x7F, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0x80, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x81, Operation.STA, AddressingMode.IZX, 6),
    Instruction(0x82, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x83, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x84, Operation.STY, AddressingMode.ZP0, 3),
    Instruction(0x85, Operation.STA, AddressingMode.ZP0, 3),
    Instruction(0x86, Operation.STX, AddressingMode.ZP0, 3),
    Instruction(0x87, Operation.XXX, AddressingMode.IMP, 3),
    Instruction(0x88, Operation.DEY, AddressingMode.IMP, 2),
    Instruction(0x89, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x8A, Operation.TXA, AddressingMode.IMP, 2),
    Instruction(0x8B, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x8C, Operation.STY, AddressingMode.ABS, 4),
    Instruction(0x8D, Operation.STA, AddressingMode.ABS, 4),
    Instruction(0x8E, Operation.STX, AddressingMode.ABS, 4),
    Instruction(0x8F, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x90, Operation.BCC, AddressingMode.REL, 2),
    Instruction(0x91, Operation.STA, AddressingMode.IZY, 6),
    Instruction(0x92, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0x93, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0x94, Operation.STY, AddressingMode.ZPX, 4),
    Instruction(0x95, Operation.STA, AddressingMode.ZPX, 4),
    Instruction(0x96, Operation.STX, AddressingMode.ZPY, 4),
    Instruction(0x97, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0x98, Operation.TYA, AddressingMode.IMP, 2),
    Instruction(0x99, Operation.STA, AddressingMode.ABY, 5),
    Instruction(0x9A, Operation.TXS, AddressingMode.IMP, 2),
    Instruction(0x9B, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0x9C, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0x9D, Operation.STA, AddressingMode.ABX, 5),
    Instruction(0x9E, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0x9F, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0xA0, Operation.LDY, AddressingMode.IMM, 2),
    Instruction(0xA1, Operation.LDA, AddressingMode.IZX, 6),
    Instruction(0xA2, Operation.LDX, AddressingMode.IMM, 2),
    Instruction(0xA3, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0xA4, Operation.LDY, AddressingMode.ZP0, 3),
    Instruction(0xA5, Operation.LDA, AddressingMode.ZP0, 3),
    Instruction(0xA6, Operation.LDX, AddressingMode.ZP0, 3),
    Instruction(0xA7, Operation.XXX, AddressingMode.IMP, 3),
    Instruction(0xA8, Operation.TAY, AddressingMode.IMP, 2),
    Instruction(0xA9, Operation.LDA, AddressingMode.IMM, 2),
    Instruction(0xAA, Operation.TAX, AddressingMode.IMP, 2),
    Instruction(0xAB, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xAC, Operation.LDY, AddressingMode.ABS, 4),
    Instruction(0xAD, Operation.LDA, AddressingMode.ABS, 4),
    Instruction(0xAE, Operation.LDX, AddressingMode.ABS, 4),
    Instruction(0xAF, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0xB0, Operation.BCS, AddressingMode.REL, 2),
    Instruction(0xB1, Operation.LDA, AddressingMode.IZY, 5),
    Instruction(0xB2, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xB3, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0xB4, Operation.LDY, AddressingMode.ZPX, 4),
    Instruction(0xB5, Operation.LDA, AddressingMode.ZPX, 4),
    Instruction(0xB6, Operation.LDX, AddressingMode.ZPY, 4),
    Instruction(0xB7, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0xB8, Operation.CLV, AddressingMode.IMP, 2),
    Instruction(0xB9, Operation.LDA, AddressingMode.ABY, 4),
    Instruction(0xBA, Operation.TSX, AddressingMode.IMP, 2),
    Instruction(0xBB, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0xBC, Operation.LDY, AddressingMode.ABX, 4),
    Instruction(0xBD, Operation.LDA, AddressingMode.ABX, 4),
    Instruction(0xBE, Operation.LDX, AddressingMode.ABY, 4),
    Instruction(0xBF, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0xC0, Operation.CPY, AddressingMode.IMM, 2),
    Instruction(0xC1, Operation.CMP, AddressingMode.IZX, 6),
    Instruction(0xC2, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xC3, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0xC4, Operation.CPY, AddressingMode.ZP0, 3),
    Instruction(0xC5, Operation.CMP, AddressingMode.ZP0, 3),
    Instruction(0xC6, Operation.DEC, AddressingMode.ZP0, 5),
    Instruction(0xC7, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0xC8, Operation.INY, AddressingMode.IMP, 2),
    Instruction(0xC9, Operation.CMP, AddressingMode.IMM, 2),
    Instruction(0xCA, Operation.DEX, AddressingMode.IMP, 2),
    Instruction(0xCB, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xCC, Operation.CPY, AddressingMode.ABS, 4),
    Instruction(0xCD, Operation.CMP, AddressingMode.ABS, 4),
    Instruction(0xCE, Operation.DEC, AddressingMode.ABS, 6),
    Instruction(0xCF, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0xD0, Operation.BNE, AddressingMode.REL, 2),
    Instruction(0xD1, Operation.CMP, AddressingMode.IZY, 5),
    Instruction(0xD2, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xD3, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0xD4, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0xD5, Operation.CMP, AddressingMode.ZPX, 4),
    Instruction(0xD6, Operation.DEC, AddressingMode.ZPX, 6),
    Instruction(0xD7, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0xD8, Operation.CLD, AddressingMode.IMP, 2),
    Instruction(0xD9, Operation.CMP, AddressingMode.ABY, 4),
    Instruction(0xDA, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xDB, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0xDC, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0xDD, Operation.CMP, AddressingMode.ABX, 4),
    Instruction(0xDE, Operation.DEC, AddressingMode.ABX, 7),
    Instruction(0xDF, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0xE0, Operation.CPX, AddressingMode.IMM, 2),
    Instruction(0xE1, Operation.SBC, AddressingMode.IZX, 6),
    Instruction(0xE2, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xE3, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0xE4, Operation.CPX, AddressingMode.ZP0, 3),
    Instruction(0xE5, Operation.SBC, AddressingMode.ZP0, 3),
    Instruction(0xE6, Operation.INC, AddressingMode.ZP0, 5),
    Instruction(0xE7, Operation.XXX, AddressingMode.IMP, 5),
    Instruction(0xE8, Operation.INX, AddressingMode.IMP, 2),
    Instruction(0xE9, Operation.SBC, AddressingMode.IMM, 2),
    Instruction(0xEA, Operation.NOP, AddressingMode.IMP, 2),
    Instruction(0xEB, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xEC, Operation.CPX, AddressingMode.ABS, 4),
    Instruction(0xED, Operation.SBC, AddressingMode.ABS, 4),
    Instruction(0xEE, Operation.INC, AddressingMode.ABS, 6),
    Instruction(0xEF, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0xF0, Operation.BEQ, AddressingMode.REL, 2),
    Instruction(0xF1, Operation.SBC, AddressingMode.IZY, 5),
    Instruction(0xF2, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xF3, Operation.XXX, AddressingMode.IMP, 8),
    Instruction(0xF4, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0xF5, Operation.SBC, AddressingMode.ZPX, 4),
    Instruction(0xF6, Operation.INC, AddressingMode.ZPX, 6),
    Instruction(0xF7, Operation.XXX, AddressingMode.IMP, 6),
    Instruction(0xF8, Operation.SED, AddressingMode.IMP, 2),
    Instruction(0xF9, Operation.SBC, AddressingMode.ABY, 4),
    Instruction(0xFA, Operation.XXX, AddressingMode.IMP, 2),
    Instruction(0xFB, Operation.XXX, AddressingMode.IMP, 7),
    Instruction(0xFC, Operation.XXX, AddressingMode.IMP, 4),
    Instruction(0xFD, Operation.SBC, AddressingMode.ABX, 4),
    Instruction(0xFE, Operation.INC, AddressingMode.ABX, 7),
    Instruction(0xFF, Operation.XXX, AddressingMode.IMP, 7),
)


class OpCodes:
    """6502 decode table lookups and a small disassembler."""

    @staticmethod
    def GetEntry(opcode: int) -> Instruction:
        """
        Get the decode table entry for an opcode.

        Raises:
            ValueError: If opcode is out of valid range
        """
        if not (0 <= opcode <= 0xFF):
            raise ValueError(f"Invalid opcode: 0x{opcode:02X} (must be 0x00-0xFF)")
        return INSTRUCTIONS[opcode]

    @staticmethod
    def GetName(opcode: int) -> str:
        return OpCodes.GetEntry(opcode).operation.value

    @staticmethod
    def GetAddressingMode(opcode: int) -> AddressingMode:
        return OpCodes.GetEntry(opcode).mode

    @staticmethod
    def GetBytes(opcode: int) -> int:
        """Instruction size in bytes (1-3), derived from the addressing mode."""
        return OpCodes.GetEntry(opcode).bytes

    @staticmethod
    def GetCycles(opcode: int) -> int:
        """
        Get base cycle count for instruction.
        Note: Actual cycles may vary due to page boundary crossings and taken branches.
        """
        return OpCodes.GetEntry(opcode).cycles

    @staticmethod
    def IsIllegal(opcode: int) -> bool:
        return OpCodes.GetEntry(opcode).illegal

    @staticmethod
    def FindOpcodes(mnemonic: str, addressing_mode: Optional[AddressingMode] = None) -> List[int]:
        """
        Find all opcodes matching a mnemonic and optional addressing mode.

        Examples:
            >>> OpCodes.FindOpcodes("LDA", AddressingMode.IMM)
            [169]
        """
        mnemonic_upper = mnemonic.upper()
        return [
            entry.opcode
            for entry in INSTRUCTIONS
            if not entry.illegal
            and entry.operation.value == mnemonic_upper
            and (addressing_mode is None or entry.mode is addressing_mode)
        ]

    @staticmethod
    def GetAllMnemonics() -> List[str]:
        return sorted({entry.operation.value for entry in INSTRUCTIONS if not entry.illegal})

    @staticmethod
    def GetInstructionInfo(opcode: int) -> str:
        entry = OpCodes.GetEntry(opcode)
        illegal = " (ILLEGAL)" if entry.illegal else ""

        return (
            f"0x{opcode:02X}: {entry.operation.value} [{entry.mode.value}] - "
            f"{entry.bytes} byte(s), {entry.cycles} cycle(s){illegal}"
        )

    @staticmethod
    def DisassembleBytes(opcode: int, operand_bytes: Optional[List[int]] = None) -> str:
        """
        Disassemble an instruction with its operand bytes.

        Examples:
            >>> OpCodes.DisassembleBytes(0xA9, [0x42])
            'LDA #$42'
            >>> OpCodes.DisassembleBytes(0xAD, [0x00, 0x80])
            'LDA $8000'
        """
        entry = OpCodes.GetEntry(opcode)
        mnemonic = entry.operation.value
        operand_bytes = operand_bytes or []
        byte = operand_bytes[0] if operand_bytes else 0
        word = operand_bytes[0] | (operand_bytes[1] << 8) if len(operand_bytes) >= 2 else 0

        match entry.mode:
            case AddressingMode.IMP:
                return mnemonic
            case AddressingMode.IMM:
                return f"{mnemonic} #${byte:02X}"
            case AddressingMode.ZP0:
                return f"{mnemonic} ${byte:02X}"
            case AddressingMode.ZPX:
                return f"{mnemonic} ${byte:02X},X"
            case AddressingMode.ZPY:
                return f"{mnemonic} ${byte:02X},Y"
            case AddressingMode.ABS:
                return f"{mnemonic} ${word:04X}"
            case AddressingMode.ABX:
                return f"{mnemonic} ${word:04X},X"
            case AddressingMode.ABY:
                return f"{mnemonic} ${word:04X},Y"
            case AddressingMode.IND:
                return f"{mnemonic} (${word:04X})"
            case AddressingMode.IZX:
                return f"{mnemonic} (${byte:02X},X)"
            case AddressingMode.IZY:
                return f"{mnemonic} (${byte:02X}),Y"
            case AddressingMode.REL:
                offset = byte - 0x100 if byte & 0x80 else byte
                return f"{mnemonic} {offset:+d}"
