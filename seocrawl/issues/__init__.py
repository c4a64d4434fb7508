"""Issue types and the single-page reporters that detect them."""