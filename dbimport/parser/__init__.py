from dbimport.parser.feeder import ChunkFeeder
from dbimport.parser.splitter import ParserState, StatementSplitter, split_statements

__all__ = ["ChunkFeeder", "ParserState", "StatementSplitter", "split_statements"]
