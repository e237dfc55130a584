# payments/tests/test_references.py
import uuid
from django.test import SimpleTestCase

from payments.references import (
    BookingReference,
    MalformedReferenceError,
    build_reference,
    parse_reference,
    session_document_id,
)


class BuildReferenceTestCase(SimpleTestCase):
    """Test cases for encoding bookings into reference strings"""

    def setUp(self):
        self.psychologist_id = str(uuid.uuid4())
        self.patient_id = str(uuid.uuid4())

    def test_build_reference_format(self):
        reference = build_reference(self.psychologist_id, 1700000000000, self.patient_id)

        self.assertEqual(
            reference,
            f"sid_{self.psychologist_id}_1700000000000_uid_{self.patient_id}"
        )

    def test_build_reference_is_deterministic(self):
        first = build_reference(self.psychologist_id, 1700000000000, self.patient_id)
        second = build_reference(self.psychologist_id, 1700000000000, self.patient_id)
        self.assertEqual(first, second)

    def test_build_reference_accepts_uuid_objects_and_integral_floats(self):
        reference = build_reference(uuid.UUID(self.psychologist_id), 1700000000000.0, self.patient_id)
        self.assertIn('_1700000000000_', reference)

    def test_build_reference_rejects_separator_in_id(self):
        with self.assertRaises(ValueError):
            build_reference('psy_1', 1700000000000, self.patient_id)

        with self.assertRaises(ValueError):
            build_reference(self.psychologist_id, 1700000000000, 'user_2')

    def test_opaque_ids_round_trip(self):
        reference = build_reference('P1', 1700000000000, 'U1')

        self.assertEqual(reference, 'sid_P1_1700000000000_uid_U1')
        self.assertEqual(parse_reference(reference), BookingReference('P1', 1700000000000, 'U1'))
        self.assertEqual(session_document_id('P1', 1700000000000), 'session-P1-1700000000000')

    def test_build_reference_rejects_missing_values(self):
        with self.assertRaises(ValueError):
            build_reference('', 1700000000000, self.patient_id)

        with self.assertRaises(ValueError):
            build_reference(self.psychologist_id, None, self.patient_id)

    def test_build_reference_rejects_bad_timestamps(self):
        for timestamp in [-1, 1.5, '17000a', True, '']:
            with self.subTest(timestamp=timestamp):
                with self.assertRaises(ValueError):
                    build_reference(self.psychologist_id, timestamp, self.patient_id)

    def test_session_document_id(self):
        self.assertEqual(
            session_document_id(self.psychologist_id, 1700000000000),
            f"session-{self.psychologist_id}-1700000000000"
        )


class ParseReferenceTestCase(SimpleTestCase):
    """Test cases for decoding reference strings"""

    def setUp(self):
        self.psychologist_id = str(uuid.uuid4())
        self.patient_id = str(uuid.uuid4())

    def test_round_trip(self):
        for timestamp in [0, 1700000000000, 1893456000000]:
            with self.subTest(timestamp=timestamp):
                reference = build_reference(self.psychologist_id, timestamp, self.patient_id)
                parsed = parse_reference(reference)

                self.assertEqual(
                    parsed,
                    BookingReference(self.psychologist_id, timestamp, self.patient_id)
                )

    def test_parsed_reference_session_id(self):
        parsed = parse_reference(build_reference(self.psychologist_id, 1700000000000, self.patient_id))

        self.assertEqual(parsed.session_id, f"session-{self.psychologist_id}-1700000000000")
        self.assertEqual(str(parsed), build_reference(self.psychologist_id, 1700000000000, self.patient_id))

    def test_malformed_references_are_rejected(self):
        pid, uid = self.psychologist_id, self.patient_id
        malformed = [
            '',
            'garbage',
            f'sid_{pid}_1700000000000_uid',
            f'sid_{pid}_1700000000000_uid_{uid}_extra',
            f'xid_{pid}_1700000000000_uid_{uid}',
            f'sid_{pid}_1700000000000_usr_{uid}',
            f'sid_{pid}_17000abc_uid_{uid}',
            f'sid_{pid}_-5_uid_{uid}',
            f'sid__1700000000000_uid_{uid}',
            f'sid_{pid}_1700000000000_uid_',
        ]

        for reference in malformed:
            with self.subTest(reference=reference):
                with self.assertRaises(MalformedReferenceError):
                    parse_reference(reference)

    def test_malformed_reference_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_reference('sid_only')

    def test_non_string_reference_is_rejected(self):
        with self.assertRaises(MalformedReferenceError):
            parse_reference(None)
