"""
I2C quadrature counter driver for Raspberry Pi.

Each dead wheel is wired to a counter co-processor that accumulates
quadrature edges and exposes the count as a signed 32-bit register.
"""

import time
from typing import Optional

import smbus2

from odometry.sensors import Encoder

# Counter register map
COUNTER_REG_WHO_AM_I = 0x00
COUNTER_REG_CONTROL = 0x01
COUNTER_REG_COUNT = 0x10   # 4 bytes, big-endian, two's complement

# Configuration values
COUNTER_DEVICE_ID = 0x51
COUNTER_CONTROL_RESET = 0x01
COUNTER_CONTROL_ENABLE = 0x02

class EncoderCounterDriver:
    """
    Driver for one I2C quadrature counter channel.
    """

    def __init__(self, i2c_address: int, i2c_bus: int = 1, invert: bool = False,
                 bus: Optional[smbus2.SMBus] = None):
        """
        Initialize counter driver.

        Args:
            i2c_address: I2C address of the counter
            i2c_bus: I2C bus number (default 1 for Raspberry Pi)
            invert: Negate the count so forward travel is positive
            bus: Already open bus to share between channels
        """
        self.i2c_address = i2c_address
        self.i2c_bus = i2c_bus
        self.invert = invert
        self.bus = bus
        self._owns_bus = bus is None
        self.initialized = False

        # Last good reading, held when a transfer fails
        self.last_ticks = 0
        self.error_count = 0

    def initialize(self, reset_count: bool = True) -> bool:
        """
        Initialize the counter.

        Args:
            reset_count: Zero the hardware count so odometry starts at zero

        Returns:
            True if initialization successful
        """
        try:
            if self.bus is None:
                self.bus = smbus2.SMBus(self.i2c_bus)

            # Verify device is responding
            who_am_i = self.bus.read_byte_data(self.i2c_address, COUNTER_REG_WHO_AM_I)
            if who_am_i != COUNTER_DEVICE_ID:
                print(f"Encoder 0x{self.i2c_address:02X}: Wrong device ID {who_am_i:02X}, "
                      f"expected 0x{COUNTER_DEVICE_ID:02X}")
                return False

            control = COUNTER_CONTROL_ENABLE
            if reset_count:
                control |= COUNTER_CONTROL_RESET
            self.bus.write_byte_data(self.i2c_address, COUNTER_REG_CONTROL, control)
            time.sleep(0.01)

            self.last_ticks = 0
            self.initialized = True
            print(f"Encoder 0x{self.i2c_address:02X}: Initialized successfully")
            return True

        except Exception as e:
            print(f"Encoder 0x{self.i2c_address:02X}: Initialization failed: {e}")
            return False

    def read_ticks(self) -> int:
        """
        Read the cumulative tick count.

        Returns:
            Signed tick count. On a failed transfer the previous count is
            returned, so the missed travel shows up in the next delta.
        """
        if not self.initialized:
            return self.last_ticks

        try:
            data = self.bus.read_i2c_block_data(self.i2c_address, COUNTER_REG_COUNT, 4)
            ticks = self._bytes_to_int32(data)
            if self.invert:
                ticks = -ticks
            self.last_ticks = ticks

        except Exception as e:
            self.error_count += 1
            print(f"Encoder 0x{self.i2c_address:02X}: Failed to read count: {e}")

        return self.last_ticks

    def as_encoder(self, distance_per_tick: float) -> Encoder:
        """Wrap this channel as an odometry Encoder."""
        return Encoder(distance_per_tick, self.read_ticks)

    def _bytes_to_int32(self, data) -> int:
        """Convert four big-endian bytes to signed 32-bit integer."""
        value = (data[0] << 24) | (data[1] << 16) | (data[2] << 8) | data[3]
        # Convert to signed
        if value >= 0x80000000:
            value -= 0x100000000
        return value

    def cleanup(self):
        """Cleanup resources."""
        if self.bus and self._owns_bus:
            try:
                self.bus.close()
            except OSError as e:
                print(f"Encoder 0x{self.i2c_address:02X}: Failed to close bus: {e}")
        self.initialized = False
