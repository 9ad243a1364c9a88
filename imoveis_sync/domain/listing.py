"""
Listing - Imóvel do feed Gaia
=============================

Registro canônico de um imóvel, já normalizado a partir do XML
(Carga/Imoveis/Imovel). Todos os campos são strings, como no feed:
campos de texto ausentes viram "" e contadores/flags ausentes viram "0".

Cada campo carrega no metadata a tag XML de origem ("tag"), usada pelo
provider para montar o registro sem uma tabela paralela.

Imutável: o registro é construído a cada busca do feed e descartado.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Tuple


def _campo(tag: str, default: str = "") -> Any:
    return field(default=default, metadata={"tag": tag})


@dataclass(frozen=True)
class Corretor:
    """Corretor responsável pelo imóvel."""

    nome: str = _campo("nome")
    telefone: str = _campo("telefone")
    celular: str = _campo("celular")
    email: str = _campo("email")
    foto: str = _campo("foto")


@dataclass(frozen=True)
class Foto:
    """Foto do imóvel, na ordem em que aparece no feed."""

    nome_arquivo: str = _campo("NomeArquivo")
    foto_tipo: str = _campo("FotoTipo", "Foto")
    url_arquivo: str = _campo("URLArquivo")
    principal: str = _campo("Principal", "0")


@dataclass(frozen=True)
class Listing:
    """Imóvel normalizado. Identidade: codigo_imovel."""

    # Identificação e controle
    codigo_imovel: str = _campo("CodigoImovel")
    titulo_imovel: str = _campo("TituloImovel")
    filial: str = _campo("Filial")
    codigo_cliente: str = _campo("CodigoCliente")
    codigo_imovel_auxiliar: str = _campo("CodigoImovelAuxiliar")
    data_cadastro: str = _campo("DataCadastro")
    data_atualizacao: str = _campo("DataAtualizacao")
    data_atualizacao_imovel: str = _campo("DataAtualizacaoImovel")
    url_gaia_site: str = _campo("URLGaiaSite")
    publicar: str = _campo("Publicar", "0")

    # Classificação
    tipo_imovel: str = _campo("TipoImovel")
    sub_tipo_imovel: str = _campo("SubTipoImovel")
    finalidade: str = _campo("Finalidade")
    categoria_imovel: str = _campo("CategoriaImovel")
    status_comercial: str = _campo("StatusComercial")
    padrao_imovel: str = _campo("PadraoImovel")
    padrao_localizacao: str = _campo("PadraoLocalizacao")
    ocupacao: str = _campo("Ocupacao")
    exclusividade: str = _campo("Exclusividade", "Não")

    # Localização
    pais: str = _campo("Pais")
    estado: str = _campo("Estado")
    cidade: str = _campo("Cidade")
    bairro: str = _campo("Bairro")
    bairro_oficial: str = _campo("BairroOficial")
    regiao: str = _campo("Regiao")
    endereco: str = _campo("Endereco")
    numero: str = _campo("Numero")
    cep: str = _campo("CEP")
    complemento_endereco: str = _campo("ComplementoEndereco")
    ponto_referencia_endereco: str = _campo("PontoReferenciaEndereco")
    latitude: str = _campo("latitude")
    longitude: str = _campo("longitude")
    nome_condominio: str = _campo("NomeCondominio")
    nome_edificio: str = _campo("NomeEdificio")
    condominio_fechado: str = _campo("CondominioFechado", "0")

    # Comercial
    tipo_oferta: str = _campo("TipoOferta", "1")
    publica_valores: str = _campo("PublicaValores", "0")
    preco_venda: str = _campo("PrecoVenda", "0")
    preco_aluguel: str = _campo("PrecoAluguel", "0")
    preco_medio_m2_venda: str = _campo("PrecoMedioM2Venda", "0")
    preco_condominio: str = _campo("PrecoCondominio", "0")
    aceita_negociacao: str = _campo("AceitaNegociacao", "0")
    aceita_financiamento: str = _campo("AceitaFinanciamento", "0")

    # Físico
    area_util: str = _campo("AreaUtil", "0")
    area_total: str = _campo("AreaTotal", "0")
    unidade_metrica: str = _campo("UnidadeMetrica", "M2")
    precisa_reforma: str = _campo("PrecisaReforma", "0")
    face_imovel: str = _campo("FaceImovel")
    numero_andar: str = _campo("NumeroAndar", "0")
    qtd_dormitorios: str = _campo("QtdDormitorios", "0")
    qtd_suites: str = _campo("QtdSuites", "0")
    qtd_banheiros: str = _campo("QtdBanheiros", "0")
    qtd_salas: str = _campo("QtdSalas", "0")
    qtd_vagas: str = _campo("QtdVagas", "0")
    qtd_vagas_cobertas: str = _campo("QtdVagasCobertas", "0")
    qtd_vagas_descobertas: str = _campo("QtdVagasDescobertas", "0")
    qtd_andar: str = _campo("QtdAndar", "0")
    ano_construcao: str = _campo("AnoConstrucao", "0")
    observacao: str = _campo("Observacao")

    # Comodidades ("1"/"0")
    piscina: str = _campo("Piscina", "0")
    elevador: str = _campo("Elevador", "0")
    ar_condicionado: str = _campo("ArCondicionado", "0")
    mobiliado: str = _campo("Mobiliado", "0")
    portao_eletronico: str = _campo("PortaoEletronico", "0")
    terraco: str = _campo("Terraco", "0")
    servico_cozinha: str = _campo("ServicoCozinha", "0")
    zelador: str = _campo("Zelador", "0")
    armario_banheiro: str = _campo("ArmarioBanheiro", "0")
    armario_area_servico: str = _campo("ArmarioAreaServico", "0")
    armario_cozinha: str = _campo("ArmarioCozinha", "0")
    piso_laminado: str = _campo("PisoLaminado", "0")
    quadra_poli_esportiva: str = _campo("QuadraPoliEsportiva", "0")
    sauna: str = _campo("Sauna", "0")
    varanda: str = _campo("Varanda", "0")
    vestiario: str = _campo("Vestiario", "0")
    area_servico: str = _campo("AreaServico", "0")
    interfone: str = _campo("Interfone", "0")

    # Sub-registros
    corretor: Corretor = field(default_factory=Corretor)
    fotos: Tuple[Foto, ...] = ()

    @property
    def code(self) -> str:
        return self.codigo_imovel

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["fotos"] = list(data["fotos"])
        return data


def text_fields(cls: type) -> Dict[str, Tuple[str, str]]:
    """Mapa atributo -> (tag XML, valor padrão) dos campos texto de um dataclass."""
    return {
        f.name: (f.metadata["tag"], f.default)
        for f in fields(cls)
        if "tag" in f.metadata
    }
