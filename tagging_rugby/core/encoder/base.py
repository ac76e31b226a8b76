"""
Abstract base class for clip encoders.
"""

from abc import ABC, abstractmethod


class Encoder(ABC):
    """
    Cuts a time range out of a media file into a new file.
    """

    @abstractmethod
    async def extract(self, input_path: str, start: float, end: float, output_path: str) -> None:
        """
        Write the range [start, end) of input_path to output_path.

        Args:
            input_path: Source media file
            start: Range start in seconds
            end: Range end in seconds
            output_path: Destination file, overwritten if present

        Raises:
            ExportError: If the encoder exits with a failure
            EncoderMissingError: If the encoder binary is not installed
        """
        pass

    def check_available(self) -> None:
        """
        Verify the encoder can run.

        Optional to override; the default assumes it can.
        """
