from udpframe.checksum import calc_checksum, verify_checksum


def test_checksum_round_trip():
    data = bytes([0x01, 0x02, 0x03])
    checksum = calc_checksum(data)
    assert verify_checksum(data, checksum)


def test_invalid_checksum():
    data = bytes([0x10, 0x20, 0x30])
    assert not verify_checksum(data, 0x00)


def test_checksum_cancels_byte_sum():
    data = bytes(range(256)) * 3
    assert (sum(data) + calc_checksum(data)) & 0xFFFF == 0


def test_checksum_fits_sixteen_bits():
    data = bytes([0xFF]) * 1000
    value = calc_checksum(data)
    assert 0 <= value <= 0xFFFF
    assert verify_checksum(data, value)


def test_empty_data_checksum():
    assert calc_checksum(b"") == 0


def test_changed_data_fails_verification():
    data = bytes([0x01, 0x02, 0x03])
    checksum = calc_checksum(data)
    assert not verify_checksum(bytes([0x01, 0x02, 0x04]), checksum)