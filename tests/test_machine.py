"""Tests for Machine: slot rules, stepping and the signal path."""
import unittest

from alphabet import Alphabet
from errors import EnigmaError
from machine import Machine
from permutation import Permutation
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector
from suites import ARMY, NAVAL
from utilities import parse_config


def letters(machine):
    return "".join(machine.alphabet.to_char(r.setting) for r in machine.rotors[1:])


class TestHistoricalVectors(unittest.TestCase):
    def setUp(self):
        self.m = parse_config(ARMY)
        self.m.insert_rotors(["B", "I", "II", "III"])
        self.m.set_rotors("AAA")

    def test_plain_settings(self):
        self.assertEqual(self.m.convert_message("AAAAA"), "BDZGO")

    def test_ring_settings(self):
        self.m.set_rings("BBB")
        self.assertEqual(self.m.convert_message("AAAAA"), "EWTYX")

    def test_decrypts_own_output(self):
        self.m.set_plugboard(Permutation("(AQ) (EP) (KZ) (TU)", self.m.alphabet))
        cipher = self.m.convert_message("HELLOWORLD")
        self.m.set_rotors("AAA")
        self.assertEqual(self.m.convert_message(cipher), "HELLOWORLD")


class TestStepping(unittest.TestCase):
    def test_three_rotor_double_step(self):
        m = parse_config(ARMY)
        m.insert_rotors(["B", "I", "II", "III"])
        m.set_rotors("ADU")
        seen = []
        for _ in range(4):
            m.advance()
            seen.append(letters(m))
        self.assertEqual(seen, ["ADV", "AEW", "BFX", "BFY"])

    def test_five_slot_double_step(self):
        m = parse_config(NAVAL)
        m.insert_rotors(["B", "Beta", "III", "IV", "I"])
        m.set_rotors("AAJA")
        before = [r.setting for r in m.rotors]
        m.advance()
        after = [r.setting for r in m.rotors]
        changed = [i for i, (a, b) in enumerate(zip(before, after)) if a != b]
        self.assertEqual(changed, [2, 3, 4])
        self.assertEqual(letters(m), "ABKB")

    def test_no_rotor_steps_twice(self):
        m = parse_config(NAVAL)
        m.insert_rotors(["B", "Beta", "III", "IV", "I"])
        m.set_rotors("AAJQ")
        m.advance()
        self.assertEqual(letters(m), "ABKR")

    def test_fixed_rotor_never_steps(self):
        m = parse_config(NAVAL)
        m.insert_rotors(["B", "Beta", "III", "IV", "I"])
        m.set_rotors("AVJQ")
        m.advance()
        self.assertEqual(letters(m)[0], "A")

    def test_right_rotor_steps_every_symbol(self):
        m = parse_config(NAVAL)
        m.insert_rotors(["B", "Beta", "I", "II", "III"])
        m.set_rotors("AAAA")
        for _ in range(10):
            m.advance()
        self.assertEqual(letters(m), "AAAK")


class TestConversion(unittest.TestCase):
    def setUp(self):
        self.m = parse_config(NAVAL)
        self.m.insert_rotors(["B", "Beta", "III", "IV", "I"])
        self.m.set_rotors("AXLE")
        self.m.set_rings("CDEF")
        self.m.set_plugboard(Permutation("(HQ) (EX) (IP) (TR) (BY)", self.m.alphabet))

    def reset(self):
        self.m.set_rotors("AXLE")

    def test_round_trip(self):
        msg = "FROMHISSHOULDERHIAWATHATOOKTHECAMERAOFROSEWOOD"
        cipher = self.m.convert_message(msg)
        self.assertNotEqual(cipher, msg)
        self.reset()
        self.assertEqual(self.m.convert_message(cipher), msg)

    def test_no_letter_encrypts_to_itself(self):
        msg = "A" * 200
        cipher = self.m.convert_message(msg)
        self.assertNotIn("A", cipher)

    def test_convert_index_is_involution_per_position(self):
        for c in range(26):
            self.reset()
            e = self.m.convert(c)
            self.reset()
            self.assertEqual(self.m.convert(e), c)

    def test_blanks_pass_through_without_stepping(self):
        spaced = self.m.convert_message("HELLO  WORLD ")
        after_spaced = letters(self.m)
        self.reset()
        plain = self.m.convert_message("HELLOWORLD")
        self.assertEqual(spaced, plain[:5] + "  " + plain[5:] + " ")
        self.assertEqual(letters(self.m), after_spaced)

    def test_state_persists_across_calls(self):
        whole = self.m.convert_message("ABCDEFGH")
        self.reset()
        parts = self.m.convert_message("ABCD") + self.m.convert_message("EFGH")
        self.assertEqual(whole, parts)

    def test_bad_character(self):
        with self.assertRaises(EnigmaError):
            self.m.convert_message("HELLo")

    def test_identity_plugboard_by_default(self):
        m = parse_config(NAVAL)
        self.assertEqual(m.plugboard.cycles, ())


class TestMachineRules(unittest.TestCase):
    def setUp(self):
        self.alpha = Alphabet("ABCD")
        self.pool = [
            Reflector("R", Permutation("(AB) (CD)", self.alpha)),
            FixedRotor("F", Permutation("(ABC)", self.alpha)),
            MovingRotor("M1", Permutation("(AD)", self.alpha), "A"),
            MovingRotor("M2", Permutation("(BC)", self.alpha), "C"),
        ]

    def test_construction_limits(self):
        with self.assertRaises(EnigmaError):
            Machine(self.alpha, 4, 4, self.pool)
        with self.assertRaises(EnigmaError):
            Machine(self.alpha, 5, 2, self.pool)
        with self.assertRaises(EnigmaError):
            Machine(self.alpha, 1, 0, self.pool)
        m = Machine(self.alpha, 4, 2, self.pool)
        self.assertEqual((m.num_rotors, m.pawls), (4, 2))

    def test_slot_rules(self):
        m = Machine(self.alpha, 4, 2, self.pool)
        bad = [
            ["F", "R", "M1", "M2"],     # no reflector first
            ["R", "M1", "F", "M2"],     # fixed in moving region
            ["R", "F", "M1"],           # too few
            ["R", "F", "M1", "X"],      # unknown
            ["R", "F", "M1", "M1"],     # duplicate
        ]
        for names in bad:
            with self.subTest(names=names):
                with self.assertRaises(EnigmaError):
                    m.insert_rotors(names)
        m.insert_rotors(["R", "F", "M1", "M2"])
        self.assertEqual([r.name for r in m.rotors], ["R", "F", "M1", "M2"])

    def test_moving_rotor_in_fixed_region(self):
        m = Machine(self.alpha, 4, 1, self.pool)
        with self.assertRaises(EnigmaError):
            m.insert_rotors(["R", "F", "M1", "M2"])

    def test_failed_insert_keeps_slots(self):
        m = Machine(self.alpha, 4, 2, self.pool)
        m.insert_rotors(["R", "F", "M1", "M2"])
        with self.assertRaises(EnigmaError):
            m.insert_rotors(["R", "M1", "F", "M2"])
        self.assertEqual(m.rotor(3).name, "M2")

    def test_first_match_by_name(self):
        pool = self.pool + [MovingRotor("M2", Permutation("", self.alpha), "")]
        m = Machine(self.alpha, 4, 2, pool)
        m.insert_rotors(["R", "F", "M1", "M2"])
        self.assertIs(m.rotor(3), pool[3])

    def test_settings_validation(self):
        m = Machine(self.alpha, 4, 2, self.pool)
        with self.assertRaises(EnigmaError):
            m.set_rotors("AAA")
        with self.assertRaises(EnigmaError):
            m.convert(0)
        m.insert_rotors(["R", "F", "M1", "M2"])
        for bad in ("AA", "AAAA", "AAE"):
            with self.assertRaises(EnigmaError):
                m.set_rotors(bad)
            with self.assertRaises(EnigmaError):
                m.set_rings(bad)
        m.set_rotors("BCD")
        self.assertEqual([r.setting for r in m.rotors[1:]], [1, 2, 3])

    def test_plugboard_alphabet_must_match(self):
        m = Machine(self.alpha, 4, 2, self.pool)
        with self.assertRaises(EnigmaError):
            m.set_plugboard(Permutation("", Alphabet("ABCDE")))


if __name__ == "__main__":
    unittest.main()
