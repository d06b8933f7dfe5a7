class Scan:
    """
    A character cursor over a declaration or a raw command-line argument.
    """

    _src: str
    _off: int

    def __init__(self, src: str, off: int = 0):
        """
        Initializes a new `Scan` object.

        Args:
            src: The string to scan.
            off: The starting offset within the string.
        """
        self._src = src
        self._off = off

    def curr(self) -> str:
        """
        Returns the character under the cursor.

        Returns:
            The current character, or '\0' past the end of the string.
        """
        if self.eof():
            return "\0"
        return self._src[self._off]

    def next(self) -> str:
        """
        Advances the cursor by one character.

        Returns:
            The new current character, or '\0' past the end of the string.
        """
        if self.eof():
            return "\0"

        self._off += 1
        return self.curr()

    def eof(self) -> bool:
        """
        Checks if the cursor reached the end of the string.
        """
        return self._off >= len(self._src)

    def skipStr(self, s: str) -> bool:
        """
        Attempts to skip over the given string.

        Args:
            s: The string to skip.

        Returns:
            True if the string was skipped, False otherwise.
        """
        if self._src[self._off :].startswith(s):
            self._off += len(s)
            return True

        return False

    def until(self, stops: str) -> str:
        """
        Consumes characters up to, but not including, any character of `stops`.

        Args:
            stops: The characters that end the run.

        Returns:
            The consumed text, possibly empty.
        """
        res = ""
        while not self.eof() and self.curr() not in stops:
            res += self.curr()
            self.next()
        return res

    def rest(self) -> str:
        """Consumes and returns everything left in the string."""
        res = self._src[self._off :]
        self._off = len(self._src)
        return res
